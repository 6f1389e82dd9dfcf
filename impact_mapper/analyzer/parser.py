"""Tree-sitter parser for JavaScript and TypeScript sources."""
from pathlib import Path
from typing import Optional
from tree_sitter import Language, Parser, Tree
import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript


class ParseFailure(ValueError):
    """Raised when a source file cannot be turned into a syntax tree."""

    def __init__(self, file_path: str | Path, reason: str = "syntax error"):
        self.file_path = Path(file_path)
        self.reason = reason
        super().__init__(f"Failed to parse {self.file_path}: {reason}")


class LanguageParser:
    """Multi-grammar parser using the tree-sitter v0.22+ API."""

    SUPPORTED_LANGUAGES = {
        '.js': 'javascript',
        '.jsx': 'javascript',
        '.mjs': 'javascript',
        '.cjs': 'javascript',
        '.ts': 'typescript',
        '.tsx': 'tsx',
    }

    def __init__(self, language: str):
        """Initialize parser for given language (javascript, typescript, tsx).

        Args:
            language: One of 'javascript', 'typescript', 'tsx'

        Raises:
            ValueError: If language is not supported
        """
        self.language = language
        self.parser = self._create_parser()

    def _create_parser(self) -> Parser:
        """Build a Parser bound to the grammar for this language.

        Returns:
            Configured Parser instance

        Raises:
            ValueError: If language is not supported
        """
        if self.language == 'javascript':
            # The JavaScript grammar parses JSX natively
            lang = Language(tsjavascript.language())
        elif self.language == 'typescript':
            lang = Language(tstypescript.language_typescript())
        elif self.language == 'tsx':
            lang = Language(tstypescript.language_tsx())
        else:
            raise ValueError(f"Unsupported language: {self.language}")

        return Parser(lang)

    def parse_source(self, source_code: bytes) -> Optional[Tree]:
        """Parse raw source bytes.

        tree-sitter recovers from syntax errors instead of raising, so a tree
        containing ERROR or MISSING nodes is reported as a failure.

        Args:
            source_code: Source bytes to parse

        Returns:
            Parsed Tree, or None if the source does not parse cleanly
        """
        if isinstance(source_code, str):
            source_code = source_code.encode('utf-8')

        tree = self.parser.parse(source_code)
        if tree.root_node.has_error:
            return None
        return tree

    @classmethod
    def from_file_extension(cls, file_path: str | Path) -> Optional['LanguageParser']:
        """Create parser based on file extension.

        Args:
            file_path: Path to determine language from

        Returns:
            LanguageParser instance, or None if extension not supported
        """
        extension = Path(file_path).suffix.lower()

        language = cls.SUPPORTED_LANGUAGES.get(extension)
        if language:
            return cls(language)
        return None


def read_and_parse(file_path: str | Path) -> tuple[bytes, Tree]:
    """Read a source file and parse it with the grammar matching its extension.

    Args:
        file_path: Path of the file to parse

    Returns:
        Tuple of (source bytes, syntax tree)

    Raises:
        ParseFailure: If the extension is unsupported or the source has syntax errors
    """
    file_path = Path(file_path)
    parser = LanguageParser.from_file_extension(file_path)
    if parser is None:
        raise ParseFailure(file_path, f"unsupported extension '{file_path.suffix}'")

    with open(file_path, 'rb') as f:
        source_code = f.read()

    tree = parser.parse_source(source_code)
    if tree is None:
        raise ParseFailure(file_path)
    return source_code, tree
