"""Seed data for development and tests.

Accounts use the configured `application.domain` for their e-mail suffix,
except the shop owner's personal address. Seeding only runs against an empty
`users` table; `reset_database()` wipes and re-seeds.
"""

from __future__ import annotations

import logging
from typing import Dict

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection, Engine

from storefront.config import get_config
from storefront.db.base import transaction
from storefront.logic import repository_baskets, repository_products, repository_reviews, repository_users
from storefront.logic.security import hash_password

logger = logging.getLogger(__name__)

# (id, local part or full address, username, password, role)
USERS = [
    (1, "admin", "", "admin123", "admin"),
    (2, "jim", "", "ncc-1701", "customer"),
    (3, "bender", "", "OhG0dPlease1nsertLiquor!", "customer"),
    (4, "bjoern.kimminich@gmail.com", "bkimminich", "bW9jLmxpYW1nQGhjaW5pbW1pay5ucmVvamI=", "admin"),
    (5, "amy", "", "K1f.....................", "customer"),
]

PRODUCTS = [
    (1, "Apple Juice (1000ml)", "1.99", "The all-time classic."),
    (2, "Orange Juice (1000ml)", "2.99", "Made from oranges hand-picked by Uncle Dittmeyer."),
    (3, "Eggfruit Juice (500ml)", "8.99", "Now with even more exotic flavour."),
    (4, "Raspberry Juice (1000ml)", "4.99", "Made from blended Raspberry Pi, water and sugar."),
    (5, "Lemon Juice (500ml)", "2.99", "Sour but full of vitamins."),
    (6, "Banana Juice (1000ml)", "1.99", "Monkeys love it the most."),
    (7, "OWASP Juice Shop T-Shirt", "22.49", "Real fans wear it 24/7!"),
    (8, "OWASP Juice Shop CTF Girlie-Shirt", "22.49", "For serious Capture-the-Flag heroines only!"),
    (9, "OWASP SSL Advanced Forensic Tool (O-Saft)", "0.01", "O-Saft is an easy to use tool to show information about SSL certificate."),
    (10, "Christmas Super-Surprise-Box (2014 Edition)", "29.99", "Contains a random selection of 10 bottles (each 500ml) of our tastiest juices."),
    (11, "Rippertuer Special Juice", "16.99", "Contains a magical collection of the rarest fruits gathered from all around the world."),
    (12, "OWASP Juice Shop Sticker (2015/2016 design)", "999.99", "Die-cut sticker with the official 2015/2016 logo."),
    (13, "OWASP Juice Shop Iron-Ons (16pcs)", "14.99", "Upgrade your clothes with washer safe iron-ons."),
    (14, "OWASP Juice Shop Magnets (16pcs)", "15.99", "Your fridge will be even cooler with these magnets."),
    (15, "OWASP Juice Shop Sticker Page", "9.99", "Massive decoration opportunities with these sticker pages."),
    (16, "OWASP Juice Shop Sticker Single", "4.99", "Super high-quality vinyl sticker single."),
    (17, "OWASP Juice Shop Temporary Tattoos (16pcs)", "14.99", "Get one of these temporary tattoos to proudly wear the logo."),
    (18, "OWASP Juice Shop Mug", "21.99", "Black mug with regular logo on one side and CTF logo on the other."),
    (19, "OWASP Juice Shop Hoodie", "49.99", "Mr. Robot-style apparel."),
    (20, "OWASP Juice Shop-CTF Velcro Patch", "2.92", "4x3\" embroidered patch with velcro backside."),
    (21, "Woodruff Syrup \"Forest Master X-Treme\"", "6.99", "Harvested and manufactured in the Black Forest."),
    (22, "Green Smoothie", "1.99", "Looks poisonous but is actually very good for your health!"),
    (23, "Quince Juice (1000ml)", "4.99", "Juice of the Cydonia oblonga fruit."),
    (24, "Apple Pomace", "0.89", "Finest pressings of apples."),
]

# basket id -> (owner user id, [(product id, quantity)])
BASKETS = {
    1: (1, [(1, 2), (2, 3), (3, 1)]),
    2: (2, [(4, 2)]),
    3: (3, [(5, 1)]),
    4: (5, [(4, 2)]),
    5: (4, []),
}

# (author user id, product id, message, [liker user ids])
REVIEWS = [
    (2, 20, "Looks so much better on my uniform than the boring Starfleet symbol.", []),
    (2, 22, "Fresh out of a replicator.", []),
    (3, 22, "Fresh out of a replicator. Bite my shiny metal juice!", [1]),
    (1, 1, "One of my favorites!", [2, 3]),
]

_TABLES_CHILD_FIRST = [
    "review_likes",
    "reviews",
    "order_lines",
    "orders",
    "basket_items",
    "baskets",
    "products",
    "users",
]

_HASH_CACHE: Dict[str, str] = {}


def _hashed(password: str) -> str:
    # Argon2 is deliberately slow; reuse hashes across re-seeds in one process
    if password not in _HASH_CACHE:
        _HASH_CACHE[password] = hash_password(password)
    return _HASH_CACHE[password]


def email_for(local_or_address: str, domain: str | None = None) -> str:
    if "@" in local_or_address:
        return local_or_address
    return f"{local_or_address}@{domain or get_config().application.domain}"


def _insert_seed_rows(conn: Connection, domain: str) -> None:
    emails: Dict[int, str] = {}
    for user_id, local, username, password, role in USERS:
        email = email_for(local, domain)
        repository_users.insert_user(
            conn,
            user_id=user_id,
            email=email,
            username=username,
            password_hash=_hashed(password),
            role=role,
        )
        emails[user_id] = email
    for product_id, name, price, description in PRODUCTS:
        repository_products.upsert_product(
            conn, product_id=product_id, name=name, price=price, description=description
        )
    for basket_id, (owner, items) in BASKETS.items():
        conn.execute(
            sql_text("INSERT INTO baskets (id, user_id) VALUES (:id, :uid)"),
            {"id": basket_id, "uid": owner},
        )
        for product_id, quantity in items:
            repository_baskets.add_basket_item(conn, basket_id, product_id, quantity)
    for author_id, product_id, message, likers in REVIEWS:
        review_id = repository_reviews.insert_review(
            conn, product_id=product_id, author=emails[author_id], message=message
        )
        for liker in likers:
            repository_reviews.add_like(conn, review_id, emails[liker])


def seed_database(engine: Engine) -> bool:
    """Insert seed rows into an empty database. Returns True when seeding ran."""
    domain = get_config().application.domain
    with transaction(engine) as conn:
        if conn.execute(sql_text("SELECT 1 FROM users LIMIT 1")).fetchone():
            return False
        _insert_seed_rows(conn, domain)
    logger.info("db.seeded users=%s products=%s domain=%s", len(USERS), len(PRODUCTS), domain)
    return True


def reset_database(engine: Engine) -> None:
    """Delete every row and seed again in one transaction."""
    domain = get_config().application.domain
    with transaction(engine) as conn:
        for table in _TABLES_CHILD_FIRST:
            conn.execute(sql_text(f"DELETE FROM {table}"))
        _insert_seed_rows(conn, domain)
    logger.info("db.reset domain=%s", domain)


__all__ = ["USERS", "PRODUCTS", "BASKETS", "REVIEWS", "email_for", "seed_database", "reset_database"]
