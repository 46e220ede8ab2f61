import sys, os
# Ensure project root is on sys.path so `pizza_store` can be imported when this script is run directly
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from pizza_store.db.session import Base, SessionLocal, engine
from pizza_store.db.seed import seed_catalog
import pizza_store.models.address  # noqa: F401
import pizza_store.models.catalog  # noqa: F401
import pizza_store.models.order  # noqa: F401
import pizza_store.models.pizza  # noqa: F401


def main():
    print("Using DB:", engine.url.render_as_string(hide_password=True))
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if seed_catalog(db):
            print("Catalog seeded")
        else:
            print("Catalog already present, nothing to do")
    finally:
        db.close()


if __name__ == "__main__":
    main()
