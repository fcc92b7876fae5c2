"""
Obsidiane Auth Python SDK - Basic Usage Example

This example demonstrates the basic usage of the Obsidiane Auth Python SDK.
Point OBSIDIANE_AUTH_BASE_URL at a running Auth API to try it.
"""

import asyncio
import logging
import os

from obsidiane_auth import (
    ApiError,
    AsyncAuthClient,
    AuthClient,
    AuthClientConfig,
    NetworkError,
    RegisterData,
    User,
    create_auth_client,
)


BASE_URL = os.environ.get("OBSIDIANE_AUTH_BASE_URL", "http://localhost:8000")


def sync_example():
    """Synchronous client example."""
    print("=== Sync Client Example ===\n")

    client = create_auth_client(BASE_URL, timeout_ms=5000, debug=True)
    print(f"Client initialized: {client!r}")

    try:
        result = client.auth.login("user@example.com", "SecurePassword123!")
        print(f"Logged in as: {result['user']['email']} (exp={result['exp']})")
        print(f"Session cookies: {sorted(client.cookies.as_dict())}")

        me = client.auth.me()
        print(f"Current user: {User.from_dict(me.get('user', {}))}")

        print(f"Refreshed, new exp: {client.auth.refresh()['exp']}")
        client.auth.logout()
    except ApiError as e:
        print(f"API error: {e.code} (status {e.status_code})")
    except NetworkError as e:
        print(f"Network error (expected without a running API): {e.message}")
    finally:
        client.close()


def admin_example():
    """Listing users and invites through JSON-LD collections."""
    print("\n=== Admin Example ===\n")

    with AuthClient(AuthClientConfig(base_url=BASE_URL)) as client:
        try:
            client.auth.login("admin@example.com", "AdminPassword123!")

            users = client.users.list()
            print(f"{users.total_items} users")
            for user in users:
                print(f"  {user.id}: {user.get('email')}")

            client.auth.invite_user("colleague@example.com")
            for invite in client.invites.list():
                print(f"  invite {invite.id}: {invite.get('email')}")
        except ApiError as e:
            print(f"API error: {e.code} (status {e.status_code})")
        except NetworkError as e:
            print(f"Network error (expected without a running API): {e.message}")


async def async_example():
    """Asynchronous client example."""
    print("\n=== Async Client Example ===\n")

    async with AsyncAuthClient(AuthClientConfig(base_url=BASE_URL, debug=True)) as client:
        try:
            result = await client.auth.register(RegisterData(
                email="newuser@example.com",
                password="SecurePassword123!",
            ))
            print(f"Registered: {result}")
        except ApiError as e:
            print(f"API error: {e.code} (status {e.status_code})")
        except NetworkError as e:
            print(f"Network error (expected without a running API): {e.message}")


def main():
    logging.basicConfig(level=logging.DEBUG)
    sync_example()
    admin_example()
    asyncio.run(async_example())


if __name__ == "__main__":
    main()
