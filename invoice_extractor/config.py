"""Configuration settings for the invoice extractor"""
import os
from dotenv import load_dotenv

load_dotenv()

# Generation service selection: "openai" or "gemini"
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai").lower()

# OpenAI
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")  # JSON responses enabled via response_format

# Gemini
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

# Upload limit applied by the CLI before a document enters the pipeline
MAX_FILE_SIZE = int(os.getenv("MAX_FILE_SIZE", 10 * 1024 * 1024))  # 10MB

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
REPLY_LOG_LIMIT = 500  # Max chars of an unparseable model reply written to the log
