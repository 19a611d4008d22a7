"""
Catalog RAG - Prompt Templates & Response Constants
=====================================================
Centralised prompt management for the query service.  All prompts and
user-facing fallback strings live here so they can be versioned and
reviewed independently of application logic.

Exports
-------
GENERIC_SYSTEM_PROMPT, PRODUCT_SYSTEM_PROMPT_TEMPLATE,
DOCUMENT_CONTENT_TEMPLATE, CONTEXT_LINE_TEMPLATE,
NO_RESPONSE_TEXT, SEARCH_FAILED_ERROR, SEARCH_FAILED_RESPONSE,
INIT_SUCCESS_MESSAGE, INIT_FAILED_ERROR.
"""

# ══════════════════════════════════════════════════════════════════════
#  SYSTEM PROMPTS
# ══════════════════════════════════════════════════════════════════════

# Used before the index is initialised: the LLM answers with no catalog.
GENERIC_SYSTEM_PROMPT: str = "You are a helpful AI assistant. Answer questions clearly and concisely."

# ``{context}`` receives one CONTEXT_LINE_TEMPLATE line per matched product.
PRODUCT_SYSTEM_PROMPT_TEMPLATE: str = (
    "You are a helpful product recommendation assistant. "
    "Use the following product catalog to answer user questions about products. "
    "Always be helpful and provide specific product recommendations when relevant."
    "\n\nAvailable Products:\n{context}"
)


# ══════════════════════════════════════════════════════════════════════
#  CATALOG PROJECTIONS
# ══════════════════════════════════════════════════════════════════════

# Text embedded for each product.
DOCUMENT_CONTENT_TEMPLATE: str = "{name}: {description}. Category: {category}. Price: ${price}"

# One line of LLM context per matched product.
CONTEXT_LINE_TEMPLATE: str = "{name}: {description} (${price})"


# ══════════════════════════════════════════════════════════════════════
#  RESPONSE STRINGS
# ══════════════════════════════════════════════════════════════════════

NO_RESPONSE_TEXT: str = "No response generated"

SEARCH_FAILED_ERROR: str = "Search failed"
SEARCH_FAILED_RESPONSE: str = "Search encountered an error"

INIT_SUCCESS_MESSAGE: str = "RAG index initialized successfully"
INIT_FAILED_ERROR: str = "Initialization failed"
