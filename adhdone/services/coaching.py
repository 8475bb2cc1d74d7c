"""
Coaching text generation for the ADHDone tools.

Each function takes the validated arguments of one tool and returns the markdown
text shown to the user. Generation is pure apart from the random celebration
opener; missing inputs degrade to neutral wording instead of failing.
"""

import random

from adhdone.core.constants import UNKNOWN_CALLER
from adhdone.models.schemas import (
    BreakDownTaskArguments,
    CompleteTaskArguments,
    HelpMeStartArguments,
    StartTimerArguments,
)

FALLBACK_TASK = "this task"

CLEANING_STEPS = (
    "🎯 Stand up and walk to the room (30 sec)",
    "👀 Look around and pick ONE surface to focus on (30 sec)",
    "🗑️ Grab 5 items that are rubbish and bin them (2 min)",
    "📦 Put 5 things back where they belong (2 min)",
    "✨ Wipe down that ONE surface (2 min)",
)

EMAIL_STEPS = (
    "📧 Open your email app (30 sec)",
    "🗑️ Delete 5 obvious spam/junk emails (1 min)",
    "⭐ Star 3 emails that actually need replies (1 min)",
    "✍️ Reply to ONE email - just 2-3 sentences (3 min)",
    "🎉 Close email. You did something!",
)

STUDY_STEPS = (
    "📚 Get your materials out on the desk (1 min)",
    "📖 Open to the right page/document (30 sec)",
    "👁️ Read just the first paragraph/section (2 min)",
    "✏️ Write ONE sentence about what you read (2 min)",
    "🎯 Decide: continue or take a 2-min break?",
)

GENERIC_STEPS = (
    "🎯 Think: What's the very first physical action? (1 min)",
    "👣 Do that first action - nothing else (2 min)",
    "✅ Notice: You started! That's the hardest part",
    "🔄 What's the next tiny step? (2 min)",
    "🎉 Keep going or celebrate what you did!",
)

# First matching keyword group wins
STEP_PLANS: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("clean", "tidy"), CLEANING_STEPS),
    (("email", "inbox"), EMAIL_STEPS),
    (("study", "homework", "assignment"), STUDY_STEPS),
)

CELEBRATIONS = (
    "🎉 **YES! You did it!**",
    "🌟 **Amazing! Look at you go!**",
    "🚀 **Task CRUSHED!**",
    "💪 **That's what I'm talking about!**",
    "✨ **Incredible! You started AND finished!**",
)


def _task_label(task: str | None) -> str:
    return task if task else FALLBACK_TASK


def select_micro_tasks(task: str | None) -> tuple[str, ...]:
    """Pick the micro-step plan whose keywords appear in the task description."""
    task_lower = (task or "").lower()
    for keywords, steps in STEP_PLANS:
        if any(keyword in task_lower for keyword in keywords):
            return steps
    return GENERIC_STEPS


def help_me_start(args: HelpMeStartArguments, caller_id: str | None = None) -> str:
    caller = str(caller_id or UNKNOWN_CALLER)
    feeling_line = f'\nYou mentioned feeling: "{args.feeling}"\n' if args.feeling else ""

    return f"""🧠 **ADHDone is here to help!**

I hear you - "{_task_label(args.task)}" feels overwhelming right now. That's completely normal.
{feeling_line}
**Let's make this tiny:**
What's the absolute smallest first step? Something you could do in 2 minutes or less?

For example, if your task is "clean the kitchen", the tiniest step might be:
- Pick up 5 things from the counter
- Or just... walk to the kitchen and look at it

What feels doable right now?

---
*User tracking working: {caller[:8]}...*"""


def break_down_task(args: BreakDownTaskArguments, caller_id: str | None = None) -> str:
    micro_tasks = select_micro_tasks(args.task)
    steps = "\n".join(f"{i}. {step}" for i, step in enumerate(micro_tasks, start=1))

    return f"""## Breaking down: "{_task_label(args.task)}"

Here are tiny, ADHD-friendly steps:

{steps}

---

**Ready to start?** Just do step 1. Nothing else matters right now.

Would you like me to start a timer for the first step?"""


def start_timer(args: StartTimerArguments, caller_id: str | None = None) -> str:
    return f"""## ⏱️ Timer Started: {args.minutes} minutes

**Your focus task:** {_task_label(args.task)}

---

🎯 **Just this ONE thing.** Nothing else exists right now.

When you're done (or the time is up), tell me and we'll celebrate!

---
*[Timer widget coming soon - for now, use your phone timer!]*"""


def complete_task(args: CompleteTaskArguments, caller_id: str | None = None) -> str:
    celebration = random.choice(CELEBRATIONS)
    reflection = f'\nYou said: "{args.how_it_went}"\n' if args.how_it_went else ""

    return f"""{celebration}

You completed: **{_task_label(args.task)}**

---

Remember: With ADHD, starting is the hardest part. You didn't just do a task - you **beat the paralysis**. That's huge.
{reflection}
---

**What now?**
- 🔄 Want to tackle another micro-task?
- ☕ Take a well-deserved break?

---
*Streak: 1 day (tracking coming soon)*"""
