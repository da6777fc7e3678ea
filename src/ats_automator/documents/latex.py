"""LaTeX resume template and prompt construction."""

import re

from ats_automator.core.models import CandidateProfile

LATEX_TEMPLATE = r"""%-------------------------
% Resume in LaTeX
%------------------------

\documentclass[letterpaper,11pt]{article}

\usepackage{latexsym}
\usepackage[empty]{fullpage}
\usepackage{titlesec}
\usepackage{marvosym}
\usepackage[usenames,dvipsnames]{color}
\usepackage{verbatim}
\usepackage{enumitem}
\usepackage[colorlinks=true, linkcolor=blue, urlcolor=blue, citecolor=blue]{hyperref}
\usepackage{fancyhdr}
\usepackage[english]{babel}
\usepackage{tabularx}
\usepackage{geometry}

\geometry{left=0.5in, right=0.5in, top=0.5in, bottom=0.5in}

\pagestyle{fancy}
\fancyhf{}
\fancyfoot{}
\renewcommand{\headrulewidth}{0pt}
\renewcommand{\footrulewidth}{0pt}

\urlstyle{same}
\raggedbottom
\raggedright
\setlength{\tabcolsep}{0in}

\titleformat{\section}{
  \vspace{-7pt}\scshape\raggedright\large
}{}{0em}{}[\color{black}\titlerule \vspace{-5pt}]

\newcommand{\resumeItem}[1]{
  \item\small{
    {#1 \vspace{-2pt}}
  }
}

\newcommand{\resumeSubheading}[4]{
  \vspace{-1pt}\item
    \begin{tabular*}{0.97\textwidth}[t]{l@{\extracolsep{\fill}}r}
      \textbf{#1} & #2 \\
      \textit{\small#3} & \textit{\small #4} \\
    \end{tabular*}\vspace{-5pt}
}

\newcommand{\resumeSubHeadingListStart}{\begin{itemize}[leftmargin=0.15in, label={}]}
\newcommand{\resumeSubHeadingListEnd}{\end{itemize}}
\newcommand{\resumeItemListStart}{\begin{itemize}}
\newcommand{\resumeItemListEnd}{\end{itemize}\vspace{-5pt}}

\begin{document}

\begin{center}
    \textbf{\Huge \scshape {NAME}} \\ \vspace{2pt}
    \small {LOCATION} $|$ {PHONE}
\end{center}

\section{Contact}
  \begin{itemize}[leftmargin=0.15in, label={}]
    \small{\item{
      \textbf{Email:} \href{mailto:{EMAIL}}{{EMAIL}} \\
      \textbf{LinkedIn:} \href{{LINKEDIN}}{{LINKEDIN}} \\
      \textbf{Portfolio:} \href{{PORTFOLIO}}{{PORTFOLIO}}
    }}
  \end{itemize}

\section{Education}
  {EDUCATION_SECTION}

\section{Experience}
  {EXPERIENCE_SECTION}

\section{Skills}
  {SKILLS_SECTION}

\end{document}"""

SYSTEM_PROMPT = (
    "You write ATS-friendly one-page resumes in LaTeX. "
    "Answer with LaTeX source only, no explanations and no markdown."
)

_FENCE_START = re.compile(r"^```(?:latex|tex)?\s*\n?")
_FENCE_END = re.compile(r"\n?```\s*$")


def build_resume_prompt(profile: CandidateProfile, company_name: str) -> str:
    """Prompt asking for a one-page resume tailored to ``company_name``."""
    return f"""Generate an ATS-friendly LaTeX resume in EXACTLY the following format. The resume MUST be exactly 1 page. Use the exact LaTeX template structure provided below.

CANDIDATE PROFILE:
- Name: {profile.full_name}
- Email: {profile.email}
- Phone: {profile.phone}
- Location: {profile.location}
- LinkedIn: {profile.linkedin or "Not provided"}
- Portfolio/GitHub: {profile.portfolio or "Not provided"}
- Education: {profile.education.value} from {profile.school}
- Experience Level: {profile.experience_level.value} years
- Skills: {", ".join(sorted(profile.skills))}
- Work Authorized: {"Yes" if profile.work_authorized else "No"}
- Cover Letter Summary: {profile.cover_letter[:300]}

COMPANY: {company_name}

REQUIREMENTS:
1. Use the EXACT LaTeX template structure provided below
2. Resume MUST be exactly 1 page (adjust content to fit)
3. ATS-friendly format (simple, clean, keyword-rich)
4. Include: Contact, Education, Experience, Skills sections
5. Emphasize technical skills from the profile
6. Create realistic experience entries based on experience level
7. Make it professional and tailored for {company_name}

LATEX TEMPLATE STRUCTURE:
{LATEX_TEMPLATE}

Generate ONLY the complete LaTeX code (starting from \\documentclass)."""


def clean_latex(response: str) -> str:
    """Strip markdown code fences a model may wrap around the LaTeX."""
    cleaned = response.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_START.sub("", cleaned)
        cleaned = _FENCE_END.sub("", cleaned)
    return cleaned.strip()
