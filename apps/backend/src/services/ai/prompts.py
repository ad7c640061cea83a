"""Prompt templates for roast and feedback generation."""

from __future__ import annotations

from dataclasses import dataclass

from schemas.roast import CodeHorror, RoastData, RoastMode


ROAST_SYSTEM_PROMPT = "You are a savage but hilarious tech comedian. Follow the structure exactly."
FEEDBACK_SYSTEM_PROMPT = "You are a senior technical mentor providing detailed, actionable feedback."

ROAST_SNIPPET_LINES = 10
FEEDBACK_SNIPPET_LINES = 8


@dataclass(frozen=True, slots=True)
class RenderedPrompt:
    """System and user prompt for one generation call."""

    system: str
    user: str


def _code_block(horror: CodeHorror | None, max_lines: int) -> str:
    if horror is None:
        return "```javascript\n// (no sampled code)\n```"
    language = (horror.language or "javascript").lower()
    snippet = "\n".join(horror.code_snippet.split("\n")[:max_lines])
    return f"```{language}\n{snippet}\n```"


def render_roast_prompt(data: RoastData) -> str:
    dev = data.developer
    first_horror = data.code_horrors[0] if data.code_horrors else None
    horror_name = first_horror.name if first_horror else "their repos"

    return f"""You are a LEGENDARY roast comedian headlining a sold-out tech conference. Tonight's target: @{dev.username}

🎯 ROAST RULES - FOLLOW EXACTLY:

1. **RUN IT LIKE A COMEDY SET:**
   - Cold open (20 sec): Go after their bio "{dev.bio}" and company "{dev.company}"
   - Act 1, Commit Crimes (90 sec): Roast 8-12 specific commits
   - Act 2, Code Horrors (90 sec): Show 4-6 real code snippets
   - Act 3, Abandoned Projects (60 sec): Mock their dead repos
   - Closer (20 sec): One devastating callback

2. **BE HYPER-SPECIFIC. USE THE EXACT DATA:**
{data.model_dump_json(indent=2)}

3. **COMEDY REQUIREMENTS:**
   ✅ Quote EXACT commit messages together with their repo names
   ✅ Show REAL code in fenced code blocks
   ✅ Use plenty of emojis (🔥💀😂😭🤡💩🎪🚨⚰️👻🤯🙄🤦)
   ✅ Escalate: start good, end DEVASTATING
   ✅ Ask rhetorical questions ("Did you really commit 'fix' 8 times?")
   ✅ Call back to earlier jokes

4. **FORMATTING:**
   - **Bold** for commit messages
   - `inline code` for function names
   - Code blocks when showing their code
   - Emojis after punchlines
   - Short paragraphs

5. **SAMPLE OPENING:**
"@{dev.username}, your bio says '{dev.bio}' 💀 and you work at '{dev.company}' 🤡. {dev.followers} followers in {dev.account_age} years? I've seen abandoned repos with better engagement! 📉"

6. **SHOW CODE LIKE THIS:**
"In '{horror_name}', I found this masterpiece:
{_code_block(first_horror, ROAST_SNIPPET_LINES)}
Zero comments and console.logs everywhere? 🤡 This isn't code, it's a cry for help! 😭"

🔥 NOW ROAST THEM. THIS IS YOUR COMEDY SPECIAL!"""


def _issue_lines(horror: CodeHorror | None) -> str:
    if horror is None:
        return "- (no sampled code)"
    problems = horror.problems
    issues = []
    if problems.console_logs:
        issues.append("- Debug console.logs left in production code")
    if problems.no_comments:
        issues.append("- No comments explaining complex logic")
    if problems.single_letter_vars:
        issues.append("- Single-letter variables reducing readability")
    return "\n".join(issues) or "- (pick the most impactful problem)"


def render_feedback_prompt(data: RoastData) -> str:
    dev = data.developer
    first_horror = data.code_horrors[0] if data.code_horrors else None
    location = f"{first_horror.name}/{first_horror.file}" if first_horror else "their main entry point"

    return f"""You are a world-class senior engineer and technical mentor reviewing @{dev.username}'s GitHub profile.

📊 DEVELOPER PROFILE & ANALYSIS:
{data.model_dump_json(indent=2)}

🎯 WRITE A THOROUGH TECHNICAL REVIEW WITH THIS STRUCTURE:

1. **Executive Summary**
   - Snapshot of their technical profile
   - Overall skill assessment
   - Key strengths

2. **Strengths & Achievements**
   - Specific repos with real impact
   - Good practices you found
   - Technical skills demonstrated

3. **Areas for Improvement**
   - **Code Quality**: Show SPECIFIC problems in code blocks
   - **Commit Hygiene**: Reference the exact vague commits
   - **Project Management**: Name the abandoned repos
   - **Best Practices**: Missing tests, docs, .gitignore

4. **Actionable Recommendations**
   - 5-7 concrete actions they can take TODAY
   - Quick wins first
   - Resources where helpful

5. **Encouragement & Next Steps**
   - A motivating conclusion
   - Acknowledge their growth trajectory

📝 FORMATTING:
✅ ## for section headers
✅ Fenced code blocks for code
✅ **bold** for key points
✅ Bullet points for lists
✅ `inline code` for file and function names
✅ Emojis used sparingly (✅ ❌ 💡 🎯 📊 🚀 ⚠️)
✅ Professional but approachable tone

🎨 SAMPLE CODE REVIEW:
"In `{location}`, I noticed:

{_code_block(first_horror, FEEDBACK_SNIPPET_LINES)}

⚠️ **Issues Found:**
{_issue_lines(first_horror)}

💡 **Recommendation:**
Document the tricky parts, remove debug statements, use descriptive variable names."

🎯 BE SPECIFIC, ACTIONABLE AND ENCOURAGING!"""


def render_prompt(mode: RoastMode, data: RoastData) -> RenderedPrompt:
    if mode == "roast":
        return RenderedPrompt(system=ROAST_SYSTEM_PROMPT, user=render_roast_prompt(data))
    return RenderedPrompt(system=FEEDBACK_SYSTEM_PROMPT, user=render_feedback_prompt(data))
