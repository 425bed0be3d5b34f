"""
Local development server for the weather search page.
Run this from the root directory: python -m weather_slider.local_dev
"""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

root_dir = Path(__file__).parent.parent


def main() -> None:
    env_file = root_dir / ".env"
    if env_file.exists():
        load_dotenv(env_file)
        print(f"Loaded environment variables from {env_file}")
    else:
        print("No .env file found. Using environment variables from the shell.")

    print("Starting City Weather Slider...")
    print("Search page: http://localhost:8000/")

    uvicorn.run(
        "weather_slider.web_app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )


if __name__ == "__main__":
    main()
