"""Seed the configured post repository with sample gallery posts."""
from metalframe.config import get_settings
from metalframe.database import SessionLocal, engine, Base
from metalframe.repositories import get_repository

settings = get_settings()

if settings.posts_backend == "database":
    Base.metadata.create_all(bind=engine)

db = SessionLocal()
repo = get_repository(settings.posts_backend, db=db, posts_file=settings.posts_file)

sample_posts = [
    {
        "title": {"en": "Steel staircase", "uk": "Сталеві сходи"},
        "description": {
            "en": "Floating staircase with a powder-coated frame.",
            "uk": "Консольні сходи з порошковим покриттям каркаса.",
        },
        "image_url": "https://res.cloudinary.com/demo/image/upload/v1700000000/posts/staircase.jpg",
    },
    {
        "title": {"en": "Loft mezzanine", "uk": "Антресоль у лофті"},
        "description": {
            "en": "Welded mezzanine frame for a residential loft.",
            "uk": "Зварний каркас антресолі для житлового лофту.",
        },
        "image_url": "https://res.cloudinary.com/demo/image/upload/v1700000001/posts/mezzanine.jpg",
    },
    {
        "title": {"en": "Canopy", "uk": "Навіс"},
        "description": {
            "en": "Entrance canopy on a galvanized steel frame.",
            "uk": "Вхідний навіс на оцинкованому сталевому каркасі.",
        },
        "image_url": "https://res.cloudinary.com/demo/image/upload/v1700000002/posts/canopy.jpg",
    },
]

for post in sample_posts:
    created = repo.insert_post(post["title"], post["description"], post["image_url"])
    print(f"Seeded post {created.id}: {post['title']['en']}")

repo.close()
db.close()
print(f"Seeded {len(sample_posts)} posts into the {settings.posts_backend} backend.")
