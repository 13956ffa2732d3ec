import asyncio

from storefront_catalog.main import main

if __name__ == "__main__":
    asyncio.run(main())
