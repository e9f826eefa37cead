"""Prompt configuration loader for the LLM-backed MT provider."""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import yaml

REQUIRED_FIELDS = ['system_prompt', 'user_prompt_template']


@dataclass
class PromptConfig:
    """Prompt templates and sampling overrides for one task."""
    system_prompt: str
    user_prompt_template: str
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None

    def format_system_prompt(self, **kwargs) -> str:
        return self.system_prompt.format(**kwargs)

    def format_user_prompt(self, **kwargs) -> str:
        """Format user prompt template with variables.

        Args:
            **kwargs: Variables to substitute in template

        Returns:
            Formatted prompt
        """
        return self.user_prompt_template.format(**kwargs)


class PromptLoader:
    """Loads prompt configurations from YAML files."""

    def __init__(self, prompts_dir: Optional[str] = None):
        """Initialize loader.

        Args:
            prompts_dir: Directory containing prompt YAML files
                (defaults to the prompts shipped with the package)
        """
        if prompts_dir is None:
            self.prompts_dir = Path(__file__).parent / "prompts"
        else:
            self.prompts_dir = Path(prompts_dir)

        self._cache: Dict[str, PromptConfig] = {}

    def load(self, prompt_name: str) -> PromptConfig:
        """Load prompt configuration.

        Args:
            prompt_name: Name of prompt file (without .yaml extension)

        Returns:
            PromptConfig object

        Raises:
            FileNotFoundError: If prompt file not found
            ValueError: If prompt file is invalid
        """
        if prompt_name in self._cache:
            return self._cache[prompt_name]

        prompt_file = self.prompts_dir / f"{prompt_name}.yaml"
        if not prompt_file.exists():
            raise FileNotFoundError(f"Prompt file not found: {prompt_file}")

        with open(prompt_file, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        missing = [name for name in REQUIRED_FIELDS if name not in data]
        if missing:
            raise ValueError(f"Missing required fields in {prompt_file}: {missing}")

        config = PromptConfig(
            system_prompt=data['system_prompt'],
            user_prompt_template=data['user_prompt_template'],
            temperature=data.get('temperature'),
            max_tokens=data.get('max_tokens'),
        )

        self._cache[prompt_name] = config
        return config

    def list_prompts(self) -> List[str]:
        """List all available prompt names."""
        return sorted(f.stem for f in self.prompts_dir.glob("*.yaml"))
