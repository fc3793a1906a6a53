# skinswap/main.py
from dotenv import load_dotenv
load_dotenv()

from skinswap.app import create_app

app = create_app()
