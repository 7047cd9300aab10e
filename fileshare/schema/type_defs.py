"""GraphQL type definitions."""
from ariadne import gql

type_defs = gql("""
    scalar Upload

    type File {
        filename: String!
        mimetype: String!
        encoding: String!
        url: String!
    }

    type Message {
        id: ID!
        sender: String!
        content: String
        file: File
    }

    type Query {
        messages: [Message]
    }

    type Mutation {
        postMessage(sender: String!, content: String, file: Upload): Message
    }

    type Subscription {
        messageAdded: Message
    }
""")
