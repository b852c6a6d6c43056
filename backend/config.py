"""Configuration management for HighlightQA."""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# API Keys
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
HUGGINGFACE_API_KEY = os.getenv("HUGGINGFACE_API_KEY")

# Server Configuration
PORT = int(os.getenv("PORT", "3001"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173"
).split(",")

# Model Configuration
EMBEDDING_MODEL = os.getenv("EMBEDDING_MODEL", "sentence-transformers/all-MiniLM-L6-v2")
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash-latest")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4-turbo-preview")
ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-3-sonnet-20240229")
DEFAULT_PROVIDER = os.getenv("DEFAULT_PROVIDER", "groq")
LLM_MAX_TOKENS = 400
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "60"))

# Rendering Configuration
DEFAULT_RENDER_SCALE = 1.2
FALLBACK_RUN_HEIGHT = 12  # used when a run reports no height

# Selection Configuration
COVERAGE_THRESHOLD = 0.30  # min fraction of a run's box inside the selection
HEADING_SIZE_RATIO = 1.5  # font size over average * ratio marks a heading
HEADING_MAJORITY_RATIO = 0.5
SMALL_SELECTION_MAX_RUNS = 3

# Chunking Configuration
CHUNK_SIZE = 400  # characters

# Retrieval Configuration
SUPPLEMENT_TOP_K = 3
SELECTION_BOOST = 1.1

# Answer Configuration
CACHE_TTL_SECONDS = 24 * 60 * 60
MAX_CONTEXT_CHARS = 10000
MAX_QUESTION_CHARS = 1000
DOWNGRADE_DELAY_SECONDS = 2.0

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
