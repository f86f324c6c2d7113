"""
Entry point for the Meeting Bot API.
Starts the FastAPI application with uvicorn.
"""

import sys
import uvicorn

from meeting_bot.config import settings


def run():
    """Run the Meeting Bot API server."""
    print("\n" + "=" * 60)
    print("MEETING BOT API")
    print("=" * 60)
    print(f"📍 Host: {settings.api.host}:{settings.api.port}")
    print(f"📚 API Docs: http://{settings.api.host}:{settings.api.port}/api/docs")
    print(f"🎙️ Transcription relay: {settings.transcription.service_url}{settings.transcription.relay_path}")
    print("=" * 60 + "\n")

    uvicorn.run(
        "meeting_bot.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    try:
        run()
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
    except Exception as e:
        print(f"\n❌ Fatal error: {e}")
        sys.exit(1)
