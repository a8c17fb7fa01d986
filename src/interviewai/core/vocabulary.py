"""Keyword vocabularies used by the extraction and titling helpers.

Matching is a case-insensitive substring test, so order matters: results are
reported in vocabulary order, not in the order they appear in the text.
"""

from __future__ import annotations

RESUME_SKILLS: tuple[str, ...] = (
    "JavaScript", "Python", "Java", "C++", "C#", "React", "Angular", "Vue", "Node.js",
    "Express", "MongoDB", "PostgreSQL", "MySQL", "AWS", "Azure", "Docker", "Kubernetes",
    "Git", "GitHub", "REST API", "GraphQL", "TypeScript", "HTML", "CSS", "SASS",
    "Machine Learning", "AI", "Data Science", "SQL", "NoSQL", "Redis", "Elasticsearch",
    "Jenkins", "CI/CD", "Agile", "Scrum", "JIRA", "Figma", "Adobe Creative Suite",
    "Next.js", "Tailwind CSS", "Bootstrap", "Material-UI", "Ant Design", "Redux",
    "Vuex", "MobX", "Jest", "Cypress", "Selenium", "Webpack", "Vite", "Babel",
    "ESLint", "Prettier", "npm", "yarn", "pnpm", "Linux", "Windows", "macOS",
    "RESTful", "Microservices", "Serverless", "Lambda", "EC2", "S3", "CloudFront",
    "Terraform", "Ansible", "Puppet", "Chef", "Nginx", "Apache", "PM2", "Forever",
)

JOB_SKILLS: tuple[str, ...] = (
    "JavaScript", "Python", "Java", "C++", "C#", "React", "Angular", "Vue", "Node.js",
    "Express", "MongoDB", "PostgreSQL", "MySQL", "AWS", "Azure", "Docker", "Kubernetes",
    "Git", "GitHub", "REST API", "GraphQL", "TypeScript", "HTML", "CSS", "SASS",
    "Machine Learning", "AI", "Data Science", "SQL", "NoSQL", "Redis", "Elasticsearch",
    "Jenkins", "CI/CD", "Agile", "Scrum", "JIRA", "Figma", "Adobe Creative Suite",
    "Leadership", "Communication", "Problem Solving", "Team Work", "Project Management",
)

CHAT_TOPICS: tuple[str, ...] = (
    "javascript", "python", "react", "nodejs", "database", "api", "frontend", "backend",
    "coding", "programming", "development", "design", "architecture", "testing",
    "deployment", "security", "performance", "optimization", "debugging",
)


def match_keywords(text: str, vocabulary: tuple[str, ...] | list[str]) -> list[str]:
    lowered = text.lower()
    found = [keyword for keyword in vocabulary if keyword.lower() in lowered]
    return list(dict.fromkeys(found))
