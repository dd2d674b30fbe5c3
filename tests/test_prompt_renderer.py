from __future__ import annotations

import unittest

from config.list_config import DEFAULT_PROMPT_TEMPLATE
from services.prompt_renderer import render_prompt


class PromptRendererTests(unittest.TestCase):
    def test_replaces_count_and_concept(self) -> None:
        self.assertEqual(render_prompt("List {count} {concept}", 5, "colors"), "List 5 colors")

    def test_replaces_every_occurrence(self) -> None:
        rendered = render_prompt(DEFAULT_PROMPT_TEMPLATE, 3, "band names")
        self.assertNotIn("{count}", rendered)
        self.assertNotIn("{concept}", rendered)
        self.assertEqual(rendered.count("3"), 2)
        self.assertIn("band names", rendered)

    def test_template_without_tokens_is_unchanged(self) -> None:
        self.assertEqual(render_prompt("Tell me a joke", 7, "cats"), "Tell me a joke")

    def test_other_braces_are_left_alone(self) -> None:
        rendered = render_prompt('Return {"items": []} with {count} {concept} and {other}', 2, "dogs")
        self.assertEqual(rendered, 'Return {"items": []} with 2 dogs and {other}')

    def test_concept_text_is_not_rescanned_for_tokens(self) -> None:
        self.assertEqual(render_prompt("{concept}!", 4, "{count} things"), "{count} things!")


if __name__ == "__main__":
    unittest.main()
