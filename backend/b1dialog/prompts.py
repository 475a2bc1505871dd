from __future__ import annotations
import json
from typing import Any, Optional


SYSTEM_PERSONA = (
	"You are a pedagogical expert for the B1 language exam. You assess spoken and written "
	"dialog exercises and write concise, encouraging progress reports for teachers and learners."
)

TEMPERATURE = 0.4


def format_analysis(analysis: Any) -> str:
	return json.dumps(analysis, indent=2, ensure_ascii=False, sort_keys=True, default=str)


def _format_score(value: float) -> str:
	return str(int(value)) if float(value).is_integer() else str(value)


def build_progress_prompt(
	previous_summary: Optional[str],
	score_total: float,
	max_score: float,
	difficulty_level: str,
	analysis: Any,
) -> str:
	score_line = f"Score of the new session: {_format_score(score_total)} / {_format_score(max_score)} (difficulty: {difficulty_level})\n"
	analysis_block = f"Analysis of the new session (JSON):\n{format_analysis(analysis)}\n\n"
	if previous_summary:
		return (
			"Update the learner's progress summary for this topic.\n"
			f"Previous progress summary:\n---\n{previous_summary}\n---\n\n"
			+ score_line
			+ analysis_block
			+ "Write an updated summary with these sections:\n"
			"1. Development (how the learner has changed since the previous summary)\n"
			"2. Strengths\n"
			"3. Weaknesses\n"
			"4. Recommendations (concrete next practice steps)\n"
			"Keep it under about 200 words. Output only the summary text."
		)
	return (
		"Write the learner's first progress summary for this topic.\n"
		+ score_line
		+ analysis_block
		+ "Write a summary with these sections:\n"
		"1. Strengths\n"
		"2. Weaknesses\n"
		"3. Recommendations (concrete next practice steps)\n"
		"Keep it under about 200 words. Output only the summary text."
	)
