"""
Posts a fake Telegram update to a running server

    python scripts/send_test_update.py "/start"
    python scripts/send_test_update.py THYAO
"""
import httpx
import asyncio
import sys
import time

URL = "http://localhost:8000/api/v1/webhook"
USER_ID = 123456789  # Replace with your Telegram user id


def build_update(text: str) -> dict:
    """Minimal private-chat message update"""
    return {
        "update_id": int(time.time()),
        "message": {
            "message_id": 1,
            "from": {"id": USER_ID, "is_bot": False, "first_name": "Test", "username": "test_user"},
            "chat": {"id": USER_ID, "type": "private"},
            "date": int(time.time()),
            "text": text,
        },
    }


async def send_update(text: str):
    payload = build_update(text)

    print(f"🧪 Testing webhook: {URL}")
    print(f"📤 Sending text: {text}\n")

    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(URL, json=payload, timeout=10.0)

            print(f"✅ Status: {response.status_code}")
            print(f"📥 Response: {response.text[:200]}")

            if response.status_code == 200:
                print("\n✅ Webhook is working!")
            else:
                print(f"\n❌ Webhook returned {response.status_code}")

    except httpx.HTTPError as e:
        print(f"❌ Error: {e}")


if __name__ == "__main__":
    asyncio.run(send_update(sys.argv[1] if len(sys.argv) > 1 else "/start"))
