"""Prompt templates for the LLM oracle.

In the templates only the single-brace names are variables; JSON examples use {{ }} for literal braces.
"""

JSON_MODE = (
    "You are operating in JSON Mode. Provide all responses exclusively in the requested JSON format, "
    "adhering strictly to the specified schema."
)

PLANNER_SYSTEM = JSON_MODE + " You are a task planner that breaks down complex tasks into logical, sequential steps."

PLAN_PROMPT = """I need to break down the following task into sequential steps:

TASK: {objective}

Analyze this task and create a plan with steps that:
1. Are small enough to be executed individually
2. Build upon each other logically
3. Cover all aspects of the requested task
4. Include any necessary setup, implementation, testing, and refinement steps

Return only JSON with this exact structure:
{{ "title": "A concise title for the task", "steps": [{{ "description": "What needs to be done in this step" }}, ...] }}"""

EXECUTOR_SYSTEM = JSON_MODE + " You are a step executor that carries out individual steps of a larger task."

DECIDE_PROMPT = """I need to execute the following step of a task:

STEP: {step_description}

PREVIOUS CONTEXT:
{context}

Execute this step and report:
1. Whether the step was completed successfully
2. The output or result of the step
3. Any code produced during this step
4. The next action: continue to the next step, retry this step, modify the plan, or mark the task complete

Return only JSON with this exact structure:
{{ "success": true, "output": "Result of this step", "code": "Code produced (optional)", "nextAction": "continueToNext | retry | modifyPlan | complete" }}"""

REVISER_SYSTEM = JSON_MODE + " You are a task planner that revises plans when a step fails."

REVISE_PROMPT = """I need to revise a task plan because a step failed:

ORIGINAL TASK: {title}

COMPLETED STEPS:
{completed_steps}

FAILED STEP:
{failed_description}

FAILURE DETAILS:
{failure_details}

Create a new plan that:
1. Takes into account what has been successfully completed
2. Addresses the issues in the failed step
3. Provides a clear path forward to complete the original task

Return only JSON with this exact structure:
{{ "steps": [{{ "description": "What needs to be done in this step" }}, ...] }}"""

ADVISOR_SYSTEM = JSON_MODE + " You are a reviewer who spots risks and next considerations in a task that is under way."

ADVISE_PROMPT = """{plan_summary}

Based on this information, what should I consider next? What potential issues might I encounter?
Give exactly {num_questions} follow-up questions or suggestions.

Return only JSON with this exact structure:
{{ "questions": ["First question or suggestion", ...] }}"""
