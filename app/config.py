import os
from dotenv import load_dotenv

load_dotenv(dotenv_path=".env")

# Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

# Timer
TIMER_TICK_SECONDS = float(os.getenv("TIMER_TICK_SECONDS", "1"))
TIMER_COMPLETION_POLICY = os.getenv("TIMER_COMPLETION_POLICY", "keep")  # "keep" or "clear"
TIMER_PAUSE_STORE_PATH = os.getenv(
    "TIMER_PAUSE_STORE_PATH",
    os.path.join(os.path.expanduser("~"), ".lifelog", "timer_pauses.json"),
)
MAX_TIMER_SECONDS = 24 * 60 * 60  # 24 hours
MIN_TIMER_SECONDS = 1

# Client-side access to this API (TimerApiClient)
LIFELOG_API_URL = os.getenv("LIFELOG_API_URL", "http://localhost:8000")
