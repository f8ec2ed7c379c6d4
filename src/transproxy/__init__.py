"""
Translation proxy with DeepL -> Groq -> Hugging Face fallback.
"""

__version__ = "0.1.0"
