"""GraphQL queries against the generated pg_graphql schema.

Collections follow the Relay connection shape (``edges { node }`` plus
``pageInfo``).
"""

from blog_stage.graphql.operation import Operation

POST_FIELDS = """
          id
          title
          body
          excerpt
          featured_image
          status
          author_id
          created_at
          updated_at
"""

# ============================================
# POSTS
# ============================================

# Published page plus an aliased connection whose edge count is the total.
GET_POSTS_WITH_OFFSET = Operation(
    name="GetPostsWithOffset",
    collections=("postsCollection",),
    document=f"""
  query GetPostsWithOffset($first: Int!, $offset: Int, $orderBy: [postsOrderBy!]) {{
    postsCollection(
      first: $first,
      offset: $offset,
      orderBy: $orderBy,
      filter: {{ status: {{ eq: "published" }} }}
    ) {{
      edges {{
        node {{{POST_FIELDS}        }}
      }}
      pageInfo {{
        hasNextPage
        hasPreviousPage
      }}
    }}
    postsCount: postsCollection(filter: {{ status: {{ eq: "published" }} }}) {{
      edges {{
        __typename
      }}
    }}
  }}
""",
)

GET_POST_BY_ID = Operation(
    name="GetPostById",
    collections=("postsCollection",),
    document=f"""
  query GetPostById($id: UUID!) {{
    postsCollection(filter: {{ id: {{ eq: $id }} }}, first: 1) {{
      edges {{
        node {{{POST_FIELDS}        }}
      }}
    }}
  }}
""",
)

GET_POSTS_BY_IDS = Operation(
    name="GetPostsByIds",
    collections=("postsCollection",),
    document=f"""
  query GetPostsByIds($ids: [UUID!]!, $first: Int!) {{
    postsCollection(
      first: $first,
      filter: {{ id: {{ in: $ids }}, status: {{ eq: "published" }} }},
      orderBy: [{{ created_at: DescNullsLast }}]
    ) {{
      edges {{
        node {{{POST_FIELDS}        }}
      }}
    }}
  }}
""",
)

GET_ALL_POST_IDS = Operation(
    name="GetAllPostIds",
    collections=("postsCollection",),
    document="""
  query GetAllPostIds($first: Int!) {
    postsCollection(first: $first, filter: { status: { eq: "published" } }) {
      edges {
        node {
          id
          updated_at
        }
      }
    }
  }
""",
)

# Includes drafts; RLS limits drafts to their author.
GET_POSTS_BY_AUTHOR = Operation(
    name="GetPostsByAuthor",
    collections=("postsCollection",),
    document="""
  query GetPostsByAuthor($authorId: UUID!, $first: Int!, $offset: Int) {
    postsCollection(
      first: $first,
      offset: $offset,
      filter: { author_id: { eq: $authorId } },
      orderBy: [{ created_at: DescNullsLast }]
    ) {
      edges {
        node {
          id
          title
          body
          excerpt
          status
          author_id
          created_at
          updated_at
        }
      }
      pageInfo {
        hasNextPage
        hasPreviousPage
      }
    }
  }
""",
)

SEARCH_POSTS = Operation(
    name="SearchPosts",
    collections=("postsCollection",),
    document="""
  query SearchPosts($searchQuery: String!, $first: Int!, $offset: Int) {
    postsCollection(
      first: $first,
      offset: $offset,
      filter: {
        status: { eq: "published" },
        or: [
          { title: { ilike: $searchQuery } },
          { body: { ilike: $searchQuery } }
        ]
      },
      orderBy: [{ created_at: DescNullsLast }]
    ) {
      edges {
        node {
          id
          title
          body
          excerpt
          author_id
          created_at
        }
      }
      pageInfo {
        hasNextPage
      }
    }
  }
""",
)

# ============================================
# PROFILES
# ============================================

GET_PROFILE = Operation(
    name="GetProfile",
    collections=("profilesCollection",),
    document="""
  query GetProfile($id: UUID!) {
    profilesCollection(filter: { id: { eq: $id } }, first: 1) {
      edges {
        node {
          id
          display_name
          bio
          avatar_url
          website
          created_at
          updated_at
        }
      }
    }
  }
""",
)

GET_PROFILES_BY_IDS = Operation(
    name="GetProfilesByIds",
    collections=("profilesCollection",),
    document="""
  query GetProfilesByIds($ids: [UUID!]!) {
    profilesCollection(filter: { id: { in: $ids } }) {
      edges {
        node {
          id
          display_name
          avatar_url
        }
      }
    }
  }
""",
)

# ============================================
# TAGS
# ============================================

GET_TAGS = Operation(
    name="GetTags",
    collections=("tagsCollection",),
    document="""
  query GetTags {
    tagsCollection(orderBy: [{ name: AscNullsLast }]) {
      edges {
        node {
          id
          name
          slug
        }
      }
    }
  }
""",
)

GET_POSTS_BY_TAG = Operation(
    name="GetPostsByTag",
    collections=("tagsCollection", "post_tagsCollection"),
    document="""
  query GetPostsByTag($tagSlug: String!) {
    tagsCollection(filter: { slug: { eq: $tagSlug } }, first: 1) {
      edges {
        node {
          id
          name
          slug
          post_tagsCollection {
            edges {
              node {
                post_id
              }
            }
          }
        }
      }
    }
  }
""",
)

GET_POST_TAGS = Operation(
    name="GetPostTags",
    collections=("post_tagsCollection", "tagsCollection"),
    document="""
  query GetPostTags($postId: UUID!) {
    post_tagsCollection(filter: { post_id: { eq: $postId } }) {
      edges {
        node {
          tags {
            id
            name
            slug
          }
        }
      }
    }
  }
""",
)

# ============================================
# COMMENTS
# ============================================

GET_COMMENTS = Operation(
    name="GetComments",
    collections=("commentsCollection",),
    document="""
  query GetComments($postId: UUID!, $first: Int!, $offset: Int) {
    commentsCollection(
      filter: { post_id: { eq: $postId }, status: { eq: "approved" } },
      first: $first,
      offset: $offset,
      orderBy: [{ created_at: AscNullsLast }]
    ) {
      edges {
        node {
          id
          post_id
          body
          author_id
          parent_id
          status
          created_at
          updated_at
        }
      }
      pageInfo {
        hasNextPage
      }
    }
  }
""",
)

GET_COMMENT_BY_ID = Operation(
    name="GetCommentById",
    collections=("commentsCollection",),
    document="""
  query GetCommentById($id: UUID!) {
    commentsCollection(filter: { id: { eq: $id } }, first: 1) {
      edges {
        node {
          id
          post_id
          body
          author_id
          parent_id
          status
          created_at
          updated_at
        }
      }
    }
  }
""",
)

GET_COMMENT_COUNT = Operation(
    name="GetCommentCount",
    collections=("commentsCollection",),
    document="""
  query GetCommentCount($postId: UUID!) {
    commentsCollection(
      filter: { post_id: { eq: $postId }, status: { eq: "approved" } }
    ) {
      edges {
        __typename
      }
    }
  }
""",
)

# ============================================
# NOTIFICATIONS
# ============================================

GET_NOTIFICATIONS = Operation(
    name="GetNotifications",
    collections=("notificationsCollection",),
    document="""
  query GetNotifications($first: Int!, $offset: Int) {
    notificationsCollection(
      first: $first,
      offset: $offset,
      orderBy: [{ created_at: DescNullsLast }]
    ) {
      edges {
        node {
          id
          type
          title
          message
          read
          data
          created_at
        }
      }
      pageInfo {
        hasNextPage
      }
    }
  }
""",
)

GET_UNREAD_NOTIFICATION_COUNT = Operation(
    name="GetUnreadNotificationCount",
    collections=("notificationsCollection",),
    document="""
  query GetUnreadNotificationCount {
    notificationsCollection(filter: { read: { eq: false } }) {
      edges {
        __typename
      }
    }
  }
""",
)
