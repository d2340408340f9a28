import asyncio
import os
import sys

from httpx import ASGITransport

# Add parent dir to path to find main
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from client import LinkVaultAPIError, LinkVaultClient
from database import engine, Base
from main import app


async def verify_api_flow():
    print("🌟 STARTING LINKVAULT API WALKTHROUGH 🌟")
    print("=" * 45)

    print("🗄️  Step 1: Ensuring schema exists...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with LinkVaultClient("http://test", transport=ASGITransport(app=app)) as client:
        print("\n📁 Step 2: Creating a collection and links...")
        collection = await client.create_collection(name="Walkthrough", color="bg-purple-500")
        link = await client.create_link(
            title="Example",
            url="https://example.com",
            tags=["demo", "walkthrough"],
            isPublic=True,
            collectionId=collection["id"],
        )
        print(f"  ✅ Collection {collection['id']} and link {link['id']} created")

        print("\n🔎 Step 3: Discovering public links...")
        discovered = await client.list_public_links(search="demo")
        print(f"  ✅ {discovered['pagination']['total']} public match(es)")

        print("\n❤️  Step 4: Saving the link for a new user...")
        user = await client.create_user(name="Walkthrough User")
        await client.save_link(user["id"], link["id"])
        try:
            await client.save_link(user["id"], link["id"])
        except LinkVaultAPIError as exc:
            print(f"  ✅ Duplicate save rejected ({exc.status_code}: {exc.detail})")

        print("\n🏷️  Step 5: Tag summary...")
        for tag in await client.list_tags():
            print(f"  • {tag['name']} x{tag['count']} ({tag['color']})")

        print("\n🧹 Step 6: Cleaning up...")
        await client.delete_user(user["id"])
        await client.delete_link(link["id"])
        await client.delete_collection(collection["id"])
        print("  ✅ Removed walkthrough records")

    await engine.dispose()
    print("\n🏁 WALKTHROUGH COMPLETE")


if __name__ == "__main__":
    asyncio.run(verify_api_flow())
