import logging
import random
from datetime import datetime, timedelta, timezone
from sqlmodel import Session, select
from models import User, Post, Category, Like
from core.db import create_db_and_tables, engine as default_engine
from auth.security import get_password_hash

logger = logging.getLogger(__name__)

# Data pools
USERNAMES = [
    "juan", "maria", "alberto", "lucia", "pedro", "ana",
    "john", "emma", "michael", "sarah"
]

CATEGORIES = {
    "Technology": "Programming, gadgets and the web",
    "Science": "Physics, biology and space",
    "Travel": "Trips, places and tips",
    "Food": "Recipes and restaurants",
}

POST_TITLES = [
    "First steps with FastAPI",
    "Why I switched to TypeScript",
    "A week in Lisbon",
    "The perfect espresso",
    "Finally fixed that bug",
    "Learning Docker the hard way",
    "What black holes taught me about patience",
    "Sourdough for beginners",
]

POST_CONTENTS = [
    "Just finished my first project with FastAPI and it was a great experience.",
    "Anyone else loving the new TypeScript features? Here is what changed for me.",
    "Beautiful weather, great coffee and a lot of walking up and down hills.",
    "Finally solved that bug that was driving me crazy for three whole days.",
    "Does anyone have good resources for learning Docker? These helped me.",
    "A short summary of the documentary I watched about the universe last night.",
    "Flour, water, salt and a lot of patience is all you really need.",
]

DEMO_PASSWORD = "Password1!"


def random_date(start_date, end_date):
    time_between = end_date - start_date
    days_between = max(time_between.days, 1)
    random_number_of_days = random.randrange(days_between)
    random_time = timedelta(
        hours=random.randint(0, 23),
        minutes=random.randint(0, 59),
        seconds=random.randint(0, 59)
    )
    return start_date + timedelta(days=random_number_of_days) + random_time


def create_test_data(engine=None, post_count: int = 30) -> bool:
    """Fill an empty database with demo users, categories, posts and likes"""
    engine = engine or default_engine
    create_db_and_tables(engine)

    with Session(engine) as session:
        if session.exec(select(User)).first():
            logger.info("Database already has users, skipping demo data")
            return False

        categories = [
            Category(name=name, description=description)
            for name, description in CATEGORIES.items()
        ]
        session.add_all(categories)

        password_hash = get_password_hash(DEMO_PASSWORD)
        users = [
            User(username=username, email=f"{username}@example.com", password_hash=password_hash)
            for username in USERNAMES
        ]
        session.add_all(users)
        session.commit()

        # Create posts with random content and dates
        posts = []
        start_date = datetime(2024, 1, 1, tzinfo=timezone.utc)
        end_date = datetime.now(timezone.utc)
        for _ in range(post_count):
            category = random.choice(categories + [None])
            post = Post(
                title=random.choice(POST_TITLES),
                content=random.choice(POST_CONTENTS),
                author_id=random.choice(users).id,
                category_id=category.id if category else None,
                created_at=random_date(start_date, end_date),
            )
            posts.append(post)

        session.add_all(posts)
        session.commit()

        # Each user likes a few posts written by somebody else
        likes = []
        for user in users:
            possible_likes = [p for p in posts if p.author_id != user.id]
            for liked_post in random.sample(possible_likes, min(5, len(possible_likes))):
                likes.append(Like(user_id=user.id, post_id=liked_post.id))

        session.add_all(likes)
        session.commit()

        logger.info(
            f"Demo data created: {len(users)} users, {len(categories)} categories, "
            f"{len(posts)} posts, {len(likes)} likes"
        )
        return True


if __name__ == "__main__":
    create_test_data()
