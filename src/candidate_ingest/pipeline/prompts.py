"""Extraction prompt asking the model for the delimited candidate format."""

from __future__ import annotations

EXTRACTION_PROMPT = """\
You are an expert HR assistant. Analyze this CV/Resume and extract structured candidate information.

IMPORTANT: Return your response in this EXACT format with delimiters (NO JSON SYNTAX):

===CANDIDATE_DATA_START===
NAME: Full Name Here
EMAIL: email@example.com
PHONE: phone number or NONE
POSITION: Most relevant job title
EXPERIENCE_YEARS: number only
SCORE: number 0-100
SUMMARY: Brief 2-3 sentence professional summary

SKILLS_START:
skill1
skill2
skill3
SKILLS_END:

EDUCATION_START:
DEGREE: Degree Name | INSTITUTION: University Name | YEAR: 2020 | FIELD: Field of Study
EDUCATION_END:

WORK_START:
COMPANY: Company Name | POSITION: Job Title | START: 2020-01 | END: Present | DURATION: 4 years | DESC: Brief description of role and key achievements
WORK_END:

ANALYSIS_START:
SKILLS_MATCH: number 0-100
EXPERIENCE_LEVEL: Junior OR Mid-level OR Senior OR Expert
STRENGTHS: strength1 | strength2 | strength3
WEAKNESSES: weakness1 | weakness2
RECOMMENDATION: Brief hiring recommendation
HIGHLIGHTS: highlight1 | highlight2 | highlight3
ANALYSIS_END:
===CANDIDATE_DATA_END===

SCORING CRITERIA (0-100):
- Technical Skills Relevance: 30 points
- Experience Level & Quality: 25 points
- Education Background: 15 points
- Career Progression: 15 points
- Communication & Presentation: 15 points

INSTRUCTIONS:
1. Extract ALL information accurately from the document
2. Calculate a fair score based on the criteria above
3. Use NONE if information is not available
4. Use Present for current positions
5. Separate multiple items with | symbol
6. Return ONLY the data within the delimiters, no other text
7. Follow the format EXACTLY as shown

Analyze the CV now:"""
