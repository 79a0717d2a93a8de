"""
Runtime Constants

Named defaults for the LLM runtime. These values are only read by the
factories that build configuration objects (``ChunkConfig.default()``,
``RetryPolicy.transport()``, ``RuntimeSettings``); nothing mutates them at
runtime.
"""

# Vendor endpoints (OpenAI-compatible chat completions)
GROQ_BASE_URL = "https://api.groq.com/openai/v1"
CEREBRAS_BASE_URL = "https://api.cerebras.ai/v1"

# Groq models
MODEL_GROQ_LLAMA3_1_8B = "llama-3.1-8b-instant"
MODEL_GROQ_LLAMA3_3_70B = "llama-3.3-70b-versatile"
MODEL_GROQ_GPT_OSS_120B = "openai/gpt-oss-120b"
MODEL_GROQ_GPT_OSS_20B = "openai/gpt-oss-20b"
MODEL_GROQ_QWEN3_32B = "qwen/qwen3-32b"

# Cerebras models
MODEL_CEREBRAS_GPT_OSS_120B = "gpt-oss-120b"
MODEL_CEREBRAS_LLAMA3_3_70B = "llama-3.3-70b"
MODEL_CEREBRAS_QWEN3_32B = "qwen-3-32b"

# Task defaults
TASK_AGENT_DAILY_FEED_MODEL = MODEL_GROQ_GPT_OSS_120B
TASK_SUMMARY_MODEL = MODEL_GROQ_GPT_OSS_120B

DEFAULT_MODELS = {
    "groq": MODEL_GROQ_GPT_OSS_120B,
    "cerebras": MODEL_CEREBRAS_GPT_OSS_120B,
}

# Token budget (Groq free tier: 8k tokens, ~2k reserved for the response)
CHARS_PER_TOKEN = 4
DEFAULT_MAX_INPUT_CHARS = 24000  # ~6000 tokens
TRUNCATION_MARKER = "\n...[truncated due to token limit]"

# Transport
DEFAULT_REQUEST_TIMEOUT_SECONDS = 120.0

# Chunking (flashcard generation)
CHUNK_SIZE = 6000  # ~1500 tokens
CHUNK_OVERLAP = 300
CHUNK_MAX_COUNT = 20

# Chunking (summaries)
SUMMARY_CHUNK_SIZE = 20000
SUMMARY_CHUNK_OVERLAP = 400
SUMMARY_MAX_TOTAL_CHARS = 24000

# Spacing between sequential chunk calls (8000 TPM rate limit)
INTER_CHUNK_DELAY_SECONDS = 10.0

# Generic retry policy
MAX_RETRIES = 3
BASE_RETRY_DELAY_SECONDS = 2.0
MAX_RETRY_DELAY_SECONDS = 60.0

# Vendor transport retry
TRANSPORT_MAX_ATTEMPTS = 4
TRANSPORT_PRE_ATTEMPT_DELAY_SECONDS = 1.0
RATE_LIMIT_COOLDOWN_SECONDS = 30.0
TOOL_REJECTED_COOLDOWN_SECONDS = 5.0

# Dispatcher
RACE_DEADLINE_SECONDS = 120.0

# Agent loop
AGENT_MAX_ITERATIONS = 12
AGENT_TIMEOUT_SECONDS = 600.0

# Record deduplication
DEDUP_KEY_PREFIX_LEN = 50

# Learning materials
FLASHCARD_MAX_CONTENT_CHARS = 24000
FLASHCARD_CHUNKING_TOKEN_THRESHOLD = 8000
MATERIAL_SUMMARY_MAX_CONTENT_CHARS = 25000
SEARCH_QUERY_MAX_CHARS = 380  # Tavily rejects queries over 400 chars

# Daily feed tools
FEED_QUERY_DELAY_SECONDS = 5.0
FEED_MAX_SEARCH_CHARS = 30000
FEED_MAX_SEARCH_ARTICLES = 60
FEED_RESULTS_PER_QUERY = 10
FEED_SNIPPET_CHARS = 300
FEED_SCRAPE_PREVIEW_CHARS = 4000
FEED_EVAL_BATCH_SIZE = 5
FEED_EVAL_BATCH_DELAY_SECONDS = 10.0
FEED_EVAL_SNIPPET_CHARS = 80
FEED_DEFAULT_SCORE = 0.5
FEED_ARTICLE_PROVIDERS = ("google", "tavily")
FEED_DEFAULT_ARTICLE_PROVIDER = "google"
