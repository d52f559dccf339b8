import os
from dotenv import load_dotenv

load_dotenv()

# ───── Auth ─────
SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")

# ───── Shingling / matching ─────
SHINGLE_SIZE = 6
MERGE_GAP = 20          # chars allowed between hits of one segment
MIN_MATCH_CHARS = 20    # segments must be strictly longer after strip()
SNIPPET_PADDING = 80

# ───── Static corpus ─────
CORPUS_PATH = os.getenv("CORPUS_PATH", "")

# ───── Web gathering ─────
MAX_QUERIES_PER_SUBMISSION = 3
RESULTS_PER_QUERY = 2
MIN_QUERY_SENTENCE = 30
MAX_QUERY_CHARS = 160
MIN_PAGE_TEXT = 400
MAX_PAGE_CHARS = 20000

REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "8"))
WEB_GATHER_TIMEOUT = float(os.getenv("WEB_GATHER_TIMEOUT", "45"))
SEARCH_URL = "https://duckduckgo.com/html/"
READER_PROXY_URL = "https://r.jina.ai/http://"

# ───── File support ─────
ALLOWED_EXTENSIONS = {"txt", "pdf", "docx"}
MAX_UPLOAD_WORDS = 5000

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "")
