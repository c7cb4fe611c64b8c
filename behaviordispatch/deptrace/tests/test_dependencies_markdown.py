import unittest
from behaviordispatch.deptrace.dependencies_markdown import count_dependents, render_dependencies_markdown
from behaviordispatch.domain.behavior import Behavior, GatheredRef
from behaviordispatch.domain.behavior_deptraced import BehaviorDeptraced

def make_ref(name: str) -> GatheredRef:
    return GatheredRef(behavior=Behavior("acme", "api", name), content_hash=f"hash-{name}")

class TestDependenciesMarkdown(unittest.TestCase):
    def setUp(self):
        self.alpha, self.beta, self.gamma = make_ref("alpha"), make_ref("beta"), make_ref("gamma")
        self.deptraced = [
            BehaviorDeptraced(gathered=self.alpha, depends_on_direct=(self.beta,), depends_on_transitive=(self.beta, self.gamma)),
            BehaviorDeptraced(gathered=self.beta, depends_on_direct=(self.gamma,), depends_on_transitive=(self.gamma,)),
            BehaviorDeptraced(gathered=self.gamma),
        ]

    def test_count_dependents(self):
        self.assertEqual(count_dependents(self.gamma.behavior, self.deptraced), 1)
        self.assertEqual(count_dependents(self.alpha.behavior, self.deptraced), 0)

    def test_render(self):
        # Arrange
        # Act
        markdown = render_dependencies_markdown(self.deptraced)

        # Assert
        self.assertTrue(markdown.startswith("# behavior dependencies\n"))
        self.assertIn("- total behaviors: 3", markdown)
        self.assertIn("- behaviors with dependencies: 2", markdown)
        self.assertIn("- total direct dependencies: 2", markdown)
        self.assertIn("### alpha\n\n- ⏳ **direct dependencies** (1):\n  - beta\n- 🔄 **transitive dependencies** (+1):\n  - gamma\n", markdown)
        self.assertIn("### gamma\n\n- 🔗 **1** behaviors depend on this\n- ✅ no dependencies (can start immediately)\n", markdown)
        self.assertIn("- **gamma** is depended on by:\n  - beta", markdown)

    def test_most_depended_on_first(self):
        # Arrange
        # Act
        markdown = render_dependencies_markdown(self.deptraced)

        # Assert
        # beta and gamma have one dependent each, alpha has none.
        self.assertLess(markdown.index("### beta"), markdown.index("### gamma"))
        self.assertLess(markdown.index("### gamma"), markdown.index("### alpha"))

    def test_render_is_deterministic(self):
        self.assertEqual(render_dependencies_markdown(self.deptraced), render_dependencies_markdown(list(self.deptraced)))

    def test_empty(self):
        # Arrange
        # Act
        markdown = render_dependencies_markdown([])

        # Assert
        self.assertIn("- total behaviors: 0", markdown)
        self.assertIn("*no dependencies exist*", markdown)

if __name__ == '__main__':
    unittest.main()
