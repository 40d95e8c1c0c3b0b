"""GraphQL mutations against the generated pg_graphql schema.

Ownership of posts, comments, profiles and notifications is enforced by the
database's row-level security policies; a mutation the caller may not perform
simply matches no rows.
"""

from blog_stage.graphql.operation import Operation

# ============================================
# POSTS
# ============================================

CREATE_POST = Operation(
    name="CreatePost",
    kind="mutation",
    collections=("postsCollection",),
    document="""
  mutation CreatePost(
    $title: String!,
    $body: String!,
    $author_id: UUID!,
    $excerpt: String,
    $featured_image: String,
    $status: String
  ) {
    insertIntopostsCollection(objects: [{
      title: $title,
      body: $body,
      author_id: $author_id,
      excerpt: $excerpt,
      featured_image: $featured_image,
      status: $status
    }]) {
      records {
        id
        title
        body
        excerpt
        featured_image
        status
        author_id
        created_at
        updated_at
      }
    }
  }
""",
)

UPDATE_POST = Operation(
    name="UpdatePost",
    kind="mutation",
    collections=("postsCollection",),
    document="""
  mutation UpdatePost(
    $id: UUID!,
    $title: String,
    $body: String,
    $excerpt: String,
    $featured_image: String,
    $status: String
  ) {
    updatepostsCollection(
      filter: { id: { eq: $id } }
      set: {
        title: $title,
        body: $body,
        excerpt: $excerpt,
        featured_image: $featured_image,
        status: $status
      }
    ) {
      records {
        id
        title
        body
        excerpt
        featured_image
        status
        author_id
        created_at
        updated_at
      }
    }
  }
""",
)

# Dropping a post also drops its tag links and comments (FK cascade).
DELETE_POST = Operation(
    name="DeletePost",
    kind="mutation",
    collections=("postsCollection", "post_tagsCollection", "commentsCollection"),
    document="""
  mutation DeletePost($id: UUID!) {
    deleteFrompostsCollection(filter: { id: { eq: $id } }) {
      records {
        id
      }
    }
  }
""",
)

# ============================================
# PROFILES
# ============================================

UPDATE_PROFILE = Operation(
    name="UpdateProfile",
    kind="mutation",
    collections=("profilesCollection",),
    document="""
  mutation UpdateProfile(
    $id: UUID!,
    $display_name: String,
    $bio: String,
    $avatar_url: String,
    $website: String
  ) {
    updateprofilesCollection(
      filter: { id: { eq: $id } }
      set: {
        display_name: $display_name,
        bio: $bio,
        avatar_url: $avatar_url,
        website: $website
      }
    ) {
      records {
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
""",
)

CREATE_PROFILE = Operation(
    name="CreateProfile",
    kind="mutation",
    collections=("profilesCollection",),
    document="""
  mutation CreateProfile(
    $id: UUID!,
    $display_name: String,
    $bio: String,
    $avatar_url: String,
    $website: String
  ) {
    insertIntoprofilesCollection(objects: [{
      id: $id,
      display_name: $display_name,
      bio: $bio,
      avatar_url: $avatar_url,
      website: $website
    }]) {
      records {
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
""",
)

# ============================================
# TAGS
# ============================================

CREATE_TAG = Operation(
    name="CreateTag",
    kind="mutation",
    collections=("tagsCollection",),
    document="""
  mutation CreateTag($name: String!, $slug: String!) {
    insertIntotagsCollection(objects: [{ name: $name, slug: $slug }]) {
      records {
        id
        name
        slug
      }
    }
  }
""",
)

ADD_TAG_TO_POST = Operation(
    name="AddTagToPost",
    kind="mutation",
    collections=("post_tagsCollection", "tagsCollection"),
    document="""
  mutation AddTagToPost($post_id: UUID!, $tag_id: UUID!) {
    insertIntopost_tagsCollection(objects: [{ post_id: $post_id, tag_id: $tag_id }]) {
      records {
        post_id
        tag_id
      }
    }
  }
""",
)

REMOVE_TAG_FROM_POST = Operation(
    name="RemoveTagFromPost",
    kind="mutation",
    collections=("post_tagsCollection", "tagsCollection"),
    document="""
  mutation RemoveTagFromPost($post_id: UUID!, $tag_id: UUID!) {
    deleteFrompost_tagsCollection(
      filter: { post_id: { eq: $post_id }, tag_id: { eq: $tag_id } }
    ) {
      records {
        post_id
        tag_id
      }
    }
  }
""",
)

# ============================================
# COMMENTS
# ============================================

CREATE_COMMENT = Operation(
    name="CreateComment",
    kind="mutation",
    collections=("commentsCollection",),
    document="""
  mutation CreateComment(
    $post_id: UUID!,
    $author_id: UUID!,
    $body: String!,
    $parent_id: UUID
  ) {
    insertIntocommentsCollection(objects: [{
      post_id: $post_id,
      author_id: $author_id,
      body: $body,
      parent_id: $parent_id
    }]) {
      records {
        id
        post_id
        author_id
        body
        parent_id
        status
        created_at
        updated_at
      }
    }
  }
""",
)

UPDATE_COMMENT = Operation(
    name="UpdateComment",
    kind="mutation",
    collections=("commentsCollection",),
    document="""
  mutation UpdateComment($id: UUID!, $body: String!) {
    updatecommentsCollection(
      filter: { id: { eq: $id } }
      set: { body: $body }
    ) {
      records {
        id
        post_id
        author_id
        body
        parent_id
        status
        created_at
        updated_at
      }
    }
  }
""",
)

DELETE_COMMENT = Operation(
    name="DeleteComment",
    kind="mutation",
    collections=("commentsCollection",),
    document="""
  mutation DeleteComment($id: UUID!) {
    deleteFromcommentsCollection(filter: { id: { eq: $id } }) {
      records {
        id
      }
    }
  }
""",
)

# ============================================
# NOTIFICATIONS
# ============================================

MARK_NOTIFICATION_READ = Operation(
    name="MarkNotificationRead",
    kind="mutation",
    collections=("notificationsCollection",),
    document="""
  mutation MarkNotificationRead($id: UUID!) {
    updatenotificationsCollection(
      filter: { id: { eq: $id } }
      set: { read: true }
    ) {
      records {
        id
        read
      }
    }
  }
""",
)

MARK_ALL_NOTIFICATIONS_READ = Operation(
    name="MarkAllNotificationsRead",
    kind="mutation",
    collections=("notificationsCollection",),
    document="""
  mutation MarkAllNotificationsRead($user_id: UUID!) {
    updatenotificationsCollection(
      filter: { user_id: { eq: $user_id }, read: { eq: false } }
      set: { read: true }
      atMost: 1000
    ) {
      affectedCount
      records {
        id
        read
      }
    }
  }
""",
)

DELETE_NOTIFICATION = Operation(
    name="DeleteNotification",
    kind="mutation",
    collections=("notificationsCollection",),
    document="""
  mutation DeleteNotification($id: UUID!) {
    deleteFromnotificationsCollection(filter: { id: { eq: $id } }) {
      records {
        id
      }
    }
  }
""",
)
