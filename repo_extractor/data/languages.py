"""
Language tagging of changed files by file extension.
"""

from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Sequence

from ..history.models import CommitRecord


LANGUAGE_EXTENSIONS: Mapping[str, Sequence[str]] = MappingProxyType({
    "1C Enterprise": ("bsl", "os"),
    "Apex": ("cls",),
    "Assembly": ("asm",),
    "Batchfile": ("bat", "cmd", "btm"),
    "C": ("c", "h"),
    "C++": ("cpp", "cxx", "hpp", "cc", "hh", "hxx"),
    "C#": ("cs",),
    "CSS": ("css",),
    "Clojure": ("clj",),
    "COBOL": ("cbl", "cob", "cpy"),
    "CoffeeScript": ("coffee",),
    "Crystal": ("cr",),
    "Dart": ("dart",),
    "Groovy": ("groovy", "gvy", "gy", "gsh"),
    "HTML+Razor": ("cshtml",),
    "EJS": ("ejs",),
    "Elixir": ("ex", "exs"),
    "Elm": ("elm",),
    "EPP": ("epp",),
    "ERB": ("erb",),
    "Erlang": ("erl", "hrl"),
    "F#": ("fs", "fsi", "fsx", "fsscript"),
    "Fortran": ("f90", "f95", "f03", "f08", "for"),
    "Go": ("go",),
    "Haskell": ("hs", "lhs"),
    "HCL": ("hcl", "tf", "tfvars"),
    "HTML": ("html", "htm", "xhtml"),
    "JSON": ("json",),
    "Java": ("java",),
    "JavaScript": ("js", "jsx", "mjs", "cjs"),
    "Jupyter Notebook": ("ipynb",),
    "Kivy": ("kv",),
    "Kotlin": ("kt", "kts"),
    "Less": ("less",),
    "Lex": ("l",),
    "Liquid": ("liquid",),
    "Lua": ("lua",),
    "MATLAB": ("m",),
    "Nix": ("nix",),
    "Objective-C": ("mm",),
    "OpenEdge ABL": ("p", "ab", "w", "i", "x"),
    "Perl": ("pl", "pm", "t"),
    "PHP": ("php",),
    "PLSQL": ("pks", "pkb"),
    "Protocol Buffer": ("proto",),
    "Puppet": ("pp",),
    "Python": ("py",),
    "QML": ("qml",),
    "R": ("r",),
    "Raku": ("p6", "pl6", "pm6", "rk", "raku", "pod6", "rakumod", "rakudoc"),
    "Robot": ("robot",),
    "Ruby": ("rb",),
    "Rust": ("rs",),
    "Scala": ("scala",),
    "SASS": ("sass",),
    "SCSS": ("scss",),
    "Shell": ("sh",),
    "Smalltalk": ("st",),
    "Stylus": ("styl",),
    "Svelte": ("svelte",),
    "Swift": ("swift",),
    "TypeScript": ("ts", "tsx"),
    "Vue": ("vue",),
    "Xtend": ("xtend",),
    "Xtext": ("xtext",),
    "Yacc": ("y",),
})


def build_extension_map(table: Mapping[str, Sequence[str]] = LANGUAGE_EXTENSIONS) -> Mapping[str, str]:
    """Invert a language -> extensions table into a read-only extension -> language map."""
    extension_map: Dict[str, str] = {}
    for language, extensions in table.items():
        for extension in extensions:
            extension_map[extension] = language
    return MappingProxyType(extension_map)


class LanguageTagger:
    """Sets ``language`` on changed files whose extension is known."""

    def __init__(self, extension_map: Mapping[str, str]):
        self.extension_map = extension_map

    def language_for(self, path: str) -> Optional[str]:
        suffix = PurePosixPath(path).suffix
        if not suffix:
            return None
        return self.extension_map.get(suffix[1:])

    def tag(self, commits: Iterable[CommitRecord]) -> int:
        """Tag every changed file in place and return how many were recognised."""
        tagged = 0
        for commit in commits:
            for changed_file in commit.changed_files:
                changed_file.language = self.language_for(changed_file.path)
                if changed_file.language is not None:
                    tagged += 1
        return tagged
