"""
Intake Analyzer

Pre-populates the business intake questionnaire from research data:
1. Renders scraped evidence (GBP, sitemap, crawl, competitors, audits, citations) into a prompt
2. Analyzes it with Claude AI
3. Recovers structured fields from complete, truncated or malformed responses
4. Scores every field's confidence, falling back to safe defaults when needed
"""

__version__ = "0.1.0"
