# /notegen/services/prompt_library.py

"""
This file is the central, version-controlled library for all master prompts
used by the generation dispatcher. Every template takes a single
`{source_text}` placeholder.
"""

SUMMARY_PROMPT = """
You are an expert study assistant. Please summarize the following text.

**--- RULES ---**

1.  **BE CONCISE:** Keep the summary short and focused on the main points.
2.  **STAY FAITHFUL:** Only use information found in the text. Do not add outside facts.
3.  **SAME LANGUAGE:** Write the summary in the language of the text.

**--- TEXT TO SUMMARIZE ---**
{source_text}
---
"""

FLASHCARDS_PROMPT = """
You are an expert study assistant. Generate flashcards from the following text.

**--- RULES ---**

1.  **ONE CARD PER BLOCK:** Each flashcard has the question on one line and the answer on the next line.
2.  **SEPARATE CARDS:** Separate flashcards with a single blank line.
3.  **FORMAT:** Prefix the question with "Q: " and the answer with "A: ".
    Example:
    Q: What is A?
    A: B.
4.  **STAY FAITHFUL:** Every answer must be supported by the text.

**--- SOURCE TEXT ---**
{source_text}
---
"""

KEY_POINTS_PROMPT = """
You are an expert study assistant. Extract 5 to 6 key points from the following text.

**--- RULES ---**

1.  **COUNT:** Return exactly 5 or 6 points.
2.  **FORMAT:** Present them as a bulleted list. Each point should be concise.
3.  **NOTHING ELSE:** Do not include anything other than the bulleted list. No introduction, no closing remarks.

**--- SOURCE TEXT ---**
{source_text}
---
"""
