"""
Centralized configuration for LLM Prompts.

This module contains all system instructions and prompt templates used across the application.
Prompts are grouped by domain (Service) for better discoverability and context.
"""


class SummarizationPrompts:
    """Instructions sent alongside the page or video being summarized."""

    WEB_PAGE = """Summarize this web page as key-points in valid Markdown format by following the instructions given below:
1. Identify the main theme/topic of the web page and use it as the main heading of the summary.
2. Ignore extraneous content like author bios, introductory fluff, or purely decorative images unless they convey key technical information. Focus solely on the core message and technical details.
3. Highlight important terms, concepts, or actions using bold.
4. Use italic to emphasize nuances, supporting details, or sub-points.
5. Include emojis sparingly in the summary where appropriate.
6. Ensure the summary is well formatted and free of markdown violations.
7. Skip any preamble or explanation. Provide only the Markdown summary itself."""

    VIDEO = """Summarize this video as key-points in valid Markdown format by following the instructions given below:
1. Identify the main theme/topic of the video and use it as the main heading of the summary.
2. Highlight important terms, concepts, or actions using bold.
3. Use italic to emphasize nuances, supporting details, or sub-points.
4. Include emojis sparingly in the summary where appropriate.
5. Ensure the summary is well formatted and free of markdown violations.
6. Skip any preamble or explanation. Provide only the Markdown summary itself."""
