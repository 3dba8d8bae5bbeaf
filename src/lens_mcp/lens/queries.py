"""GraphQL documents sent to the Lens API."""

ACCOUNT_FIELDS = """
fragment AccountFields on Account {
  __typename
  address
  owner
  createdAt
  username {
    __typename
    id
    value
    localName
    namespace
  }
  metadata {
    __typename
    id
    name
    bio
    picture
    coverPicture
  }
}
"""

POST_METADATA_FIELDS = """
fragment PostMetadataFields on PostMetadata {
  __typename
  ... on TextOnlyMetadata { id content }
  ... on ArticleMetadata { id content title }
  ... on ImageMetadata { id content title }
  ... on VideoMetadata { id content title }
  ... on AudioMetadata { id content title }
  ... on LinkMetadata { id content sharingLink }
  ... on EmbedMetadata { id content }
  ... on LivestreamMetadata { id content title }
  ... on EventMetadata { id content title }
}
"""

REFERENCED_POST_FIELDS = """
fragment ReferencedPostFields on Post {
  __typename
  id
  author {
    address
    username {
      localName
    }
  }
  metadata {
    ...PostMetadataFields
  }
}
"""

POST_FIELDS = """
fragment PostFields on Post {
  __typename
  id
  slug
  timestamp
  isDeleted
  contentUri
  snapshotUrl
  author {
    ...AccountFields
  }
  metadata {
    ...PostMetadataFields
  }
  stats {
    __typename
    comments
    reposts
    quotes
    bookmarks
    collects
    upvotes: reactions(request: { type: UPVOTE })
  }
  root {
    ...ReferencedPostFields
  }
  commentOn {
    ...ReferencedPostFields
  }
  quoteOf {
    ...ReferencedPostFields
  }
}
"""

ANY_POST_FIELDS = """
fragment AnyPostFields on AnyPost {
  ... on Post {
    ...PostFields
  }
  ... on Repost {
    __typename
    id
    timestamp
    author {
      ...AccountFields
    }
    repostOf {
      ...PostFields
    }
  }
}
"""

APP_FIELDS = """
fragment AppFields on App {
  __typename
  address
  owner
  createdAt
  sponsorship
  treasury
  metadata {
    __typename
    name
    description
    tagline
    logo
    url
    platforms
    developer
  }
}
"""

GROUP_FIELDS = """
fragment GroupFields on Group {
  __typename
  address
  owner
  timestamp
  metadata {
    __typename
    id
    name
    description
    icon
    coverPicture
  }
}
"""

USERNAME_FIELDS = """
fragment UsernameFields on Username {
  __typename
  id
  value
  localName
  namespace
  linkedTo
  ownedBy
  timestamp
}
"""

PAGE_INFO = "pageInfo { prev next }"

POST_FRAGMENTS = ACCOUNT_FIELDS + POST_METADATA_FIELDS + REFERENCED_POST_FIELDS + POST_FIELDS
ANY_POST_FRAGMENTS = POST_FRAGMENTS + ANY_POST_FIELDS

ACCOUNT_QUERY = (
    """
query Account($request: AccountRequest!) {
  account(request: $request) {
    ...AccountFields
  }
}
"""
    + ACCOUNT_FIELDS
)

ACCOUNTS_QUERY = (
    f"""
query Accounts($request: AccountsRequest!) {{
  accounts(request: $request) {{
    items {{
      ...AccountFields
    }}
    {PAGE_INFO}
  }}
}}
"""
    + ACCOUNT_FIELDS
)

ACCOUNT_STATS_QUERY = """
query AccountStats($request: AccountStatsRequest!) {
  accountStats(request: $request) {
    __typename
    graphFollowStats {
      followers
      following
    }
    feedStats {
      posts
      comments
      reposts
      quotes
      reacted
      reactions
      collects
    }
  }
}
"""

FOLLOWERS_QUERY = (
    f"""
query Followers($request: FollowersRequest!) {{
  followers(request: $request) {{
    items {{
      followedOn
      follower {{
        ...AccountFields
      }}
    }}
    {PAGE_INFO}
  }}
}}
"""
    + ACCOUNT_FIELDS
)

FOLLOWING_QUERY = (
    f"""
query Following($request: FollowingRequest!) {{
  following(request: $request) {{
    items {{
      followedOn
      following {{
        ...AccountFields
      }}
    }}
    {PAGE_INFO}
  }}
}}
"""
    + ACCOUNT_FIELDS
)

POSTS_QUERY = (
    f"""
query Posts($request: PostsRequest!) {{
  posts(request: $request) {{
    items {{
      ...AnyPostFields
    }}
    {PAGE_INFO}
  }}
}}
"""
    + ANY_POST_FRAGMENTS
)

POST_QUERY = (
    """
query Post($request: PostRequest!) {
  post(request: $request) {
    ...AnyPostFields
  }
}
"""
    + ANY_POST_FRAGMENTS
)

POSTS_TO_EXPLORE_QUERY = (
    f"""
query PostsToExplore($request: PostsExploreRequest!) {{
  mlPostsExplore(request: $request) {{
    items {{
      ...PostFields
    }}
    {PAGE_INFO}
  }}
}}
"""
    + POST_FRAGMENTS
)

POST_REACTIONS_QUERY = (
    f"""
query PostReactions($request: PostReactionsRequest!) {{
  postReactions(request: $request) {{
    items {{
      account {{
        ...AccountFields
      }}
      reactions {{
        reaction
        reactedAt
      }}
    }}
    {PAGE_INFO}
  }}
}}
"""
    + ACCOUNT_FIELDS
)

POST_REFERENCES_QUERY = (
    f"""
query PostReferences($request: PostReferencesRequest!) {{
  postReferences(request: $request) {{
    items {{
      ...AnyPostFields
    }}
    {PAGE_INFO}
  }}
}}
"""
    + ANY_POST_FRAGMENTS
)

TIMELINE_HIGHLIGHTS_QUERY = (
    f"""
query TimelineHighlights($request: TimelineHighlightsRequest!) {{
  timelineHighlights(request: $request) {{
    items {{
      ...PostFields
    }}
    {PAGE_INFO}
  }}
}}
"""
    + POST_FRAGMENTS
)

APPS_QUERY = (
    f"""
query Apps($request: AppsRequest!) {{
  apps(request: $request) {{
    items {{
      ...AppFields
    }}
    {PAGE_INFO}
  }}
}}
"""
    + APP_FIELDS
)

APP_QUERY = (
    """
query App($request: AppRequest!) {
  app(request: $request) {
    ...AppFields
  }
}
"""
    + APP_FIELDS
)

GROUPS_QUERY = (
    f"""
query Groups($request: GroupsRequest!) {{
  groups(request: $request) {{
    items {{
      ...GroupFields
    }}
    {PAGE_INFO}
  }}
}}
"""
    + GROUP_FIELDS
)

GROUP_QUERY = (
    """
query Group($request: GroupRequest!) {
  group(request: $request) {
    ...GroupFields
  }
}
"""
    + GROUP_FIELDS
)

USERNAMES_QUERY = (
    f"""
query Usernames($request: UsernamesRequest!) {{
  usernames(request: $request) {{
    items {{
      ...UsernameFields
    }}
    {PAGE_INFO}
  }}
}}
"""
    + USERNAME_FIELDS
)
