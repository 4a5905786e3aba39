import asyncio

from sqlalchemy import select

from orderchat.config import settings
from orderchat.database import Database
from orderchat.models.order import Order
from orderchat.models.user import User


async def async_main():
    database = Database.from_settings(settings)
    await database.create_all()

    async with database.session() as session:
        existing = await session.execute(select(Order).where(Order.id == "O1"))
        if existing.scalar_one_or_none():
            print("Demo order O1 already present.")
        else:
            # Create users
            buyer = User(id=1, username="alice_buys")
            seller = User(id=2, username="bob_sells")
            outsider = User(id=3, username="carol")
            session.add_all([buyer, seller, outsider])
            await session.flush()

            # Create the order the two of them can chat about
            session.add(Order(id="O1", buyer_id=buyer.id, seller_id=seller.id))
            await session.commit()
            print("Seeded order O1 (buyer 1, seller 2) and outsider user 3.")

    await database.dispose()


if __name__ == "__main__":
    asyncio.run(async_main())
