"""Host adapters translating Pandoc JSON and Python-Markdown trees to elements."""
