from prometheus_client import Counter

users_registered_total = Counter(
    "blog_users_registered_total",
    "Total number of users registered"
)

posts_created_total = Counter(
    "blog_posts_created_total",
    "Total number of posts created"
)

likes_total = Counter(
    "blog_likes_total",
    "Like and unlike operations",
    ["action"]
)

orphans_removed_total = Counter(
    "blog_orphans_removed_total",
    "Rows removed by the integrity reconciliation job",
    ["kind"]
)
