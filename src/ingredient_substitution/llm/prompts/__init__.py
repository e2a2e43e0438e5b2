"""LLM prompt templates."""

from ingredient_substitution.llm.prompts.base import BasePrompt
from ingredient_substitution.llm.prompts.explanation import SubstitutionExplanationPrompt
from ingredient_substitution.llm.prompts.few_shot import build_few_shot_examples
from ingredient_substitution.llm.prompts.step_rewrite import StepRewritePrompt
from ingredient_substitution.llm.prompts.substitution import SubstituteGenerationPrompt


__all__ = [
    "BasePrompt",
    "StepRewritePrompt",
    "SubstituteGenerationPrompt",
    "SubstitutionExplanationPrompt",
    "build_few_shot_examples",
]
