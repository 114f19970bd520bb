MATCH_ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert career counselor and technical recruiter. Analyze user profiles "
    "against internship requirements and provide detailed matching scores and recommendations."
)

MATCH_ANALYSIS_USER_PROMPT = """
Analyze the match between this user profile and internship description:

User Profile:
{profile_text}

Internship Details:
{posting_text}

Preferences:
- Skills Weight: {skills_weight}
- Experience Weight: {experience_weight}
- Location Weight: {location_weight}
- Company Weight: {company_weight}

Provide a detailed match analysis and return ONLY a JSON object with:
{{
  "overallScore": 0.85,
  "skillsMatch": 0.9,
  "experienceMatch": 0.8,
  "locationMatch": 0.7,
  "companyFit": 0.85,
  "recommendations": ["User has strong React experience", "Consider highlighting Python projects"],
  "missingSkills": ["Docker", "AWS"],
  "strengths": ["Full-stack development", "Problem solving"]
}}

All scores are numbers between 0 and 1. Focus on specific, actionable insights.
"""

STATUS_PREDICTION_SYSTEM_PROMPT = (
    "You are an experienced recruiter who understands typical hiring timelines "
    "and application status patterns."
)

STATUS_PREDICTION_USER_PROMPT = """
Based on the following application information, predict if there should be a status update:

Application Details:
Current Status: {current_status}
Days In Current Status: {days_in_status}
Days Since Applied: {days_since_applied}
Company: {company}
Position: {title}

Application Notes: {notes}

Consider typical hiring timelines:
- 3-7 days: Applications usually move from "submitted" to "reviewing"
- 1-2 weeks: A decision may arrive
- 2+ weeks: Follow-up may be needed

Allowed statuses: {allowed_statuses}

If the status should change, answer with the new status and reasoning.
If not, answer with shouldUpdate false ("no_update_needed").

Return ONLY a JSON object:
{{
  "shouldUpdate": true,
  "newStatus": "reviewing",
  "reasoning": "Explanation of why status should or shouldn't change"
}}
"""

COVER_LETTER_SYSTEM_PROMPT = (
    "You are an expert career counselor and professional writer specializing in crafting "
    "compelling cover letters. Your letters are authentic, persuasive, and tailored to each "
    "specific opportunity."
)

COVER_LETTER_USER_PROMPT = """
Write a compelling cover letter for the following internship application:

Applicant Information:
{profile_text}

Internship Details:
{posting_text}

Cover Letter Requirements:
- Tone: {tone}
- Word Count: {word_count} words
- Custom Points to Include: {custom_points}

Guidelines:
1. Start with a strong opening that grabs attention
2. Connect the applicant's skills and experience to the specific requirements
3. Show genuine interest in the company and position
4. Include specific examples of relevant projects or achievements
5. End with a strong call to action
6. Use {register} language
7. Avoid generic templates

Format the letter with a salutation, 3-4 paragraphs, a professional closing and a signature line.
"""

ENTHUSIASTIC_VARIATION_SYSTEM_PROMPT = (
    "You are a career coach who helps candidates show more enthusiasm and passion in their applications."
)

ENTHUSIASTIC_VARIATION_USER_PROMPT = """
Rewrite this cover letter with a more enthusiastic and passionate tone while maintaining professionalism:

Original Letter:
{letter}

Applicant: {name}
Position: {title}
Company: {company}
"""

CONCISE_VARIATION_SYSTEM_PROMPT = (
    "You are an expert editor who specializes in making writing more concise and impactful."
)

CONCISE_VARIATION_USER_PROMPT = """
Create a more concise version of this cover letter (around 200-250 words) while keeping the key points:

Original Letter:
{letter}
"""

COVER_LETTER_OPTIMIZE_SYSTEM_PROMPT = (
    "You are an expert cover letter editor who helps candidates improve their application "
    "materials based on feedback."
)

COVER_LETTER_OPTIMIZE_USER_PROMPT = """
Optimize this cover letter based on the provided feedback:

Original Cover Letter:
{letter}

Feedback:
{feedback}

Applicant: {name}
Position: {title}
Company: {company}
Job Description: {description}

Address the feedback, keep the letter's strengths and keep it to 300-400 words.
Provide the optimized cover letter without additional explanations.
"""

COVER_LETTER_TIPS_SYSTEM_PROMPT = (
    "You are an experienced career counselor who provides expert advice on cover letter writing."
)

COVER_LETTER_TIPS_USER_PROMPT = """
Provide 5-7 specific, actionable tips for writing a strong cover letter for this internship:

{posting_text}

Focus on what the company is likely looking for. One tip per line.
"""
