# main.py

# Load .env before the settings object is built
from dotenv import load_dotenv
load_dotenv(override=True)

from shiptrack import create_app

# Uvicorn calls this with factory=True
app = create_app
