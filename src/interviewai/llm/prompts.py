from __future__ import annotations

QUESTION_GENERATION_PROMPT = """
Generate {count} {question_type} interview questions for a {job_title} position at {company}.

Candidate's Skills: {resume_skills}
Job Required Skills: {job_skills}

Generate questions that:
1. Are specific to the candidate's background and the job requirements
2. Test both technical knowledge and soft skills
3. Are realistic and commonly asked in real interviews
4. Vary in difficulty (easy, medium, hard)
5. Include both general and role-specific questions

For each question, provide:
- The question text
- Question type (technical/behavioral/situational/general)
- Category (e.g., "Problem Solving", "Team Work", "Technical Skills")
- Difficulty level (easy/medium/hard)

Format each question as:
Q: [Question text]
Type: [type]
Category: [category]
Difficulty: [difficulty]

---
""".strip()

ANSWER_EVALUATION_PROMPT = """
Evaluate the candidate's answer to this interview question and provide detailed feedback.

Question: {question}
Answer: {answer}

Resume Skills: {resume_skills}
Job Requirements: {job_skills}

Provide evaluation in this exact JSON format:
{{
  "score": number (1-10),
  "feedback": "detailed feedback",
  "strengths": ["strength1", "strength2"],
  "areasForImprovement": ["area1", "area2"]
}}
""".strip()

FOLLOW_UP_PROMPT = """
Based on the candidate's answer to the interview question, generate a relevant follow-up question.

Original Question: {question}
Candidate's Answer: {answer}

Resume Skills: {resume_skills}
Job Requirements: {job_skills}

Generate a follow-up question that:
1. Builds upon their answer
2. Probes deeper into their experience
3. Is relevant to the job requirements
4. Is conversational and natural

Return only the follow-up question, nothing else.
""".strip()
