"""Prompt text for flashcards, material summaries and search queries."""

FLASHCARDS = """You are a helpful assistant that creates flashcards from text.
Analyze the following text and create:
1. A short, descriptive Title for the material.
2. A list of 3-5 relevant Tags (categories).
3. 6 to 40 high-quality flashcards (Question and Answer pairs).

Existing tags you might reuse if relevant: {existing_tags}

Return ONLY a raw JSON object with the following structure:
{{
  "title": "String",
  "tags": ["String", "String"],
  "flashcards": [
    {{"question": "String", "answer": "String"}}
  ]
}}
Do not include any markdown formatting (like json code blocks).
Do not include any other text.

Text:
{content}"""

MATERIAL_SUMMARY = """You are a helpful assistant that creates concise summaries for learning materials.
Create a clear, well-structured summary of the following text that helps a student review the key concepts.
The summary should:
- Be 5-8 paragraphs
- Highlight the main concepts and key points
- Be easy to scan and review quickly
- Use bullet points where appropriate

Return ONLY the summary text, no additional formatting or metadata.

Text:
{content}"""

QUERY_OPTIMIZATION = """You are a news curator. The user likes: "{interests}".
Generate ONE specific, high-quality search query to find recent news articles for this user.
The query MUST be under 350 characters.
Return ONLY the query text. Do not use quotes."""
