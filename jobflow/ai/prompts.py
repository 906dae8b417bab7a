"""Prompt templates for the AI facade. Formatted with ``str.format``."""

PARSE_RESUME = """\
You are a resume parser. Extract structured data from the resume text below.
Return ONLY valid JSON with these exact keys (use empty string or empty list if unknown):

{{
  "name": "Full Name",
  "email": "email@example.com",
  "phone": "phone number",
  "skills": ["top 10 key skills"],
  "resume_text": "A detailed summary of experience suitable for matching against job descriptions."
}}

Resume text:
{resume_text}
"""

SUGGEST_ROLES = """\
Based on the following professional experience, suggest 5 relevant and specific job
titles this candidate should apply for. Return only a JSON array of strings.

Experience:
{experience}
"""

SEARCH_JOBS = """\
Find recent (posted in the last 5 days) job openings for {roles} in {locations}.

CRITICAL SEARCH CRITERIA:
- Return REAL job listings only.
- Prioritize listings from company career pages, LinkedIn, Indeed, or Glassdoor.

Output Format:
Return a strictly formatted JSON array of objects.
Example: [{{"title": "Software Engineer", "company": "Tech Corp", "location": "New York", "description": "React developer needed...", "url": "https://..."}}]

Do not include markdown formatting. Just return the raw JSON.
"""

ANALYZE_AND_APPLY = """\
You are an expert career automation agent.

Candidate Profile:
Name: {name}
Skills: {skills}
Experience Summary: {resume_text}

Target Job:
Title: {title}
Company: {company}
Description: {description}

Task:
1. Calculate a match score (0-100) based on skills and experience overlap.
2. Write a professional, persuasive, and concise cover letter tailored specifically to this job description.
3. Provide a brief one-sentence reason for the score.

Return ONLY JSON: {{"matchScore": <number>, "coverLetter": "<string>", "notes": "<string>"}}
"""

INTERVIEW_QUESTIONS = """\
Generate 5 technical and behavioral interview questions for a {title} role at {company}.
Based on the candidate's skills: {skills}.
Provide suggested answers and key talking points.

Return ONLY a JSON array of objects:
[{{"question": "...", "suggestedAnswer": "...", "keyPoints": ["...", "..."]}}]
"""

RESUME_FOR_JOB = """\
You are an ATS (applicant tracking system) expert. Compare the resume with the job below.

Job: {title} at {company}
Job description:
{description}

Resume:
{resume_text}

Return ONLY JSON with these keys:
{{
  "score": <0-100 ATS match score>,
  "missingKeywords": ["keywords from the job that the resume lacks"],
  "suggestedImprovements": ["concrete edits to make"],
  "optimizedSummary": "a rewritten professional summary targeting this job"
}}
"""

NETWORKING_MESSAGE = """\
Write a {format} to {target} at {company} regarding the {role} position.

My Name: {name}
My Key Skills: {skills}
My Experience: {experience}...

Tone: Professional, concise, and high-value. Focus on how I can help them.
"""

SKILL_GAP = """\
Analyze the skill gap for this candidate.

Candidate Skills: {skills}
Target Roles: {roles}
Experience: {experience}

Task:
1. Identify top 3 critical missing skills required for the target roles that the candidate seems to lack.
2. For each missing skill, suggest a concrete learning resource (generic name of course/book) and an action item.
3. Suggest one capstone project idea that would demonstrate these new skills.

Return ONLY JSON:
{{"missingSkills": ["..."], "learningPath": [{{"skill": "...", "resource": "...", "actionItem": "..."}}], "projectIdea": "..."}}
"""
