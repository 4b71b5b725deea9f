"""Tests for the tree-sitter PHP reflector and class locator."""

import json

import pytest

from docweave.core.ast_parser import ClassLocator, PhpReflector, parse_use_declaration, reflect_class
from docweave.core.errors import ConfigError, ResolutionError


# =========================================================================
# Sample PHP source fixtures
# =========================================================================

NAMESPACED_CLASS = """<?php

namespace App\\Models;

use Illuminate\\Database\\Eloquent\\Model as Base;

/**
 * Class User
 */
class User extends Base
{
    public $id;
    protected static $table = 'users';
    private $secret, $token;

    public function save()
    {
        return true;
    }

    public static function query() {}
}
"""

BRACED_NAMESPACE = """<?php

namespace App\\Jobs {
    class SendMail
    {
        public function handle() {}
    }
}

namespace App\\Events {
    class MailSent {}
}
"""

PROMOTED_CONSTRUCTOR = """<?php

class Point
{
    public function __construct(private int $x, public int $y = 0)
    {
    }
}
"""

NON_INSTANTIABLE = """<?php

abstract class Shape {}

interface Drawable {}

trait Named {}

enum Suit
{
    case Hearts;
}

class Singleton
{
    private function __construct() {}
}
"""


def _reflector(tmp_path, psr4=None):
    return PhpReflector(ClassLocator(psr4=psr4 or {}, base_dir=str(tmp_path)))


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


# =========================================================================
# Tests: Declarations
# =========================================================================

class TestReflectSource:
    def test_namespaced_class(self, tmp_path):
        reflection = _reflector(tmp_path).reflect_source(NAMESPACED_CLASS, "User.php", "App\\Models\\User")
        assert reflection.name == "\\App\\Models\\User"
        assert reflection.short_name == "User"
        assert reflection.namespace == "App\\Models"
        assert reflection.kind == "class"
        assert reflection.instantiable
        assert reflection.source == NAMESPACED_CLASS
        assert reflection.file_path == "User.php"

    def test_members(self, tmp_path):
        reflection = _reflector(tmp_path).reflect_source(NAMESPACED_CLASS, "User.php", "\\App\\Models\\User")
        assert reflection.property_names == ["id", "table", "secret", "token"]
        assert reflection.method_names == ["save", "query"]

    def test_imported_parent_resolved(self, tmp_path):
        reflection = _reflector(tmp_path).reflect_source(NAMESPACED_CLASS, "User.php", "App\\Models\\User")
        assert reflection.parent_name == "\\Illuminate\\Database\\Eloquent\\Model"

    def test_class_name_case_insensitive(self, tmp_path):
        reflection = _reflector(tmp_path).reflect_source(NAMESPACED_CLASS, "User.php", "app\\models\\USER")
        assert reflection.short_name == "User"

    def test_braced_namespaces(self, tmp_path):
        reflector = _reflector(tmp_path)
        job = reflector.reflect_source(BRACED_NAMESPACE, "jobs.php", "App\\Jobs\\SendMail")
        event = reflector.reflect_source(BRACED_NAMESPACE, "jobs.php", "App\\Events\\MailSent")
        assert job.method_names == ["handle"]
        assert event.namespace == "App\\Events"

    def test_wrong_namespace_not_found(self, tmp_path):
        with pytest.raises(ResolutionError):
            _reflector(tmp_path).reflect_source(NAMESPACED_CLASS, "User.php", "App\\User")

    def test_promoted_constructor_parameters(self, tmp_path):
        reflection = _reflector(tmp_path).reflect_source(PROMOTED_CONSTRUCTOR, "Point.php", "Point")
        assert reflection.property_names == ["x", "y"]
        assert reflection.method_names == ["__construct"]
        assert reflection.instantiable

    @pytest.mark.parametrize(
        "class_name, kind",
        [
            ("Shape", "class"),
            ("Drawable", "interface"),
            ("Named", "trait"),
            ("Suit", "enum"),
            ("Singleton", "class"),
        ],
    )
    def test_not_instantiable(self, tmp_path, class_name, kind):
        reflection = _reflector(tmp_path).reflect_source(NON_INSTANTIABLE, "shapes.php", class_name)
        assert reflection.kind == kind
        assert not reflection.instantiable


class TestDocComment:
    def test_doc_comment_and_offset(self, tmp_path):
        reflection = _reflector(tmp_path).reflect_source(NAMESPACED_CLASS, "User.php", "App\\Models\\User")
        assert reflection.doc_comment == "/**\n * Class User\n */"
        assert reflection.doc_comment_offset == NAMESPACED_CLASS.index("/**")

    def test_offset_counts_characters(self, tmp_path):
        source = "<?php\n// Größe\n/** Doc */\nclass Box {}\n"
        reflection = _reflector(tmp_path).reflect_source(source, "Box.php", "Box")
        assert reflection.doc_comment == "/** Doc */"
        assert reflection.doc_comment_offset == source.index("/** Doc */")

    def test_plain_comment_ignored(self, tmp_path):
        source = "<?php\n/* not a docblock */\nclass Box {}\n"
        reflection = _reflector(tmp_path).reflect_source(source, "Box.php", "Box")
        assert reflection.doc_comment is None
        assert reflection.doc_comment_offset is None

    def test_no_comment(self, tmp_path):
        reflection = _reflector(tmp_path).reflect_source(PROMOTED_CONSTRUCTOR, "Point.php", "Point")
        assert reflection.doc_comment is None


# =========================================================================
# Tests: Inheritance
# =========================================================================

class TestInheritance:
    @pytest.fixture
    def project(self, tmp_path):
        _write(tmp_path / "src" / "Models" / "Base.php", """<?php
namespace App\\Models;

abstract class Base
{
    public $id;
    protected $hidden;
    private $secret;

    public function save() {}
}
""")
        _write(tmp_path / "src" / "Concerns" / "HasName.php", """<?php
namespace App\\Concerns;

trait HasName
{
    private $name;

    public function getName() {}
}
""")
        _write(tmp_path / "src" / "Models" / "User.php", """<?php
namespace App\\Models;

use App\\Concerns\\HasName;

class User extends Base
{
    use HasName;

    public $email;

    public function toArray() {}

    public function SAVE() {}
}
""")
        return tmp_path

    def test_inherited_members(self, project):
        reflection = _reflector(project, {"App\\": "src"}).reflect("App\\Models\\User")
        assert reflection.property_names == ["email", "name", "id", "hidden"]
        assert reflection.method_names == ["toArray", "SAVE", "getName"]
        assert reflection.parent_name == "\\App\\Models\\Base"
        assert reflection.trait_names == ["\\App\\Concerns\\HasName"]

    def test_unresolvable_trait_skipped(self, project):
        reflection = _reflector(project, {"App\\Models\\": "src/Models"}).reflect("App\\Models\\User")
        assert reflection.property_names == ["email", "id", "hidden"]

    def test_inheritance_cycle_terminates(self, tmp_path):
        _write(tmp_path / "A.php", "<?php\nclass A extends B { public $a; }\n")
        _write(tmp_path / "B.php", "<?php\nclass B extends A { public $b; }\n")
        reflection = _reflector(tmp_path, {"": "."}).reflect("A")
        assert reflection.property_names == ["a", "b"]

    def test_reflect_class_uses_composer(self, project):
        (project / "composer.json").write_text(json.dumps({"autoload": {"psr-4": {"App\\": "src/"}}}))
        reflection = reflect_class("\\App\\Models\\User", str(project))
        assert reflection.file_path == str(project / "src" / "Models" / "User.php")


# =========================================================================
# Tests: use imports
# =========================================================================

class TestParseUseDeclaration:
    def test_simple(self):
        assert parse_use_declaration("use App\\Models\\User;") == {"user": "App\\Models\\User"}

    def test_alias(self):
        assert parse_use_declaration("use \\App\\Models\\User as Member;") == {"member": "App\\Models\\User"}

    def test_multiple(self):
        assert parse_use_declaration("use App\\A, App\\B;") == {"a": "App\\A", "b": "App\\B"}

    def test_group(self):
        imports = parse_use_declaration("use App\\Models\\{User, Post as P};")
        assert imports == {"user": "App\\Models\\User", "p": "App\\Models\\Post"}

    @pytest.mark.parametrize("text", ["use function App\\helper;", "use const App\\LIMIT;"])
    def test_functions_and_constants_ignored(self, text):
        assert parse_use_declaration(text) == {}


# =========================================================================
# Tests: Locator
# =========================================================================

class TestClassLocator:
    def test_psr4(self, tmp_path):
        path = _write(tmp_path / "src" / "Models" / "User.php", "<?php")
        locator = ClassLocator(psr4={"App\\": "src/"}, base_dir=str(tmp_path))
        assert locator.locate("\\App\\Models\\User") == str(path)

    def test_longest_prefix_wins(self, tmp_path):
        _write(tmp_path / "src" / "Models" / "User.php", "<?php")
        path = _write(tmp_path / "models" / "User.php", "<?php")
        locator = ClassLocator(psr4={"App\\": "src", "App\\Models\\": "models"}, base_dir=str(tmp_path))
        assert locator.locate("App\\Models\\User") == str(path)

    def test_falls_back_to_shorter_prefix(self, tmp_path):
        path = _write(tmp_path / "src" / "Models" / "User.php", "<?php")
        locator = ClassLocator(psr4={"App\\": "src", "App\\Models\\": "models"}, base_dir=str(tmp_path))
        assert locator.locate("App\\Models\\User") == str(path)

    def test_classmap_first(self, tmp_path):
        _write(tmp_path / "src" / "User.php", "<?php")
        path = _write(tmp_path / "legacy" / "user.inc.php", "<?php")
        locator = ClassLocator(
            psr4={"App\\": "src"},
            classmap={"App\\User": "legacy/user.inc.php"},
            base_dir=str(tmp_path),
        )
        assert locator.locate("app\\user") == str(path)

    def test_missing_classmap_file(self, tmp_path):
        locator = ClassLocator(classmap={"App\\User": "gone.php"}, base_dir=str(tmp_path))
        with pytest.raises(ResolutionError):
            locator.locate("App\\User")

    def test_unmatched(self, tmp_path):
        locator = ClassLocator(psr4={"App\\": "src"}, base_dir=str(tmp_path))
        with pytest.raises(ResolutionError, match="Cannot resolve class Vendor\\\\Thing"):
            locator.locate("Vendor\\Thing")

    def test_from_composer_reads_dev_autoload(self, tmp_path):
        (tmp_path / "composer.json").write_text(json.dumps({
            "autoload": {"psr-4": {"App\\": "src/"}},
            "autoload-dev": {"psr-4": {"Tests\\": ["tests/"]}},
        }))
        path = _write(tmp_path / "tests" / "UserTest.php", "<?php")
        locator = ClassLocator.from_composer(str(tmp_path))
        assert locator.locate("Tests\\UserTest") == str(path)

    def test_from_composer_without_file(self, tmp_path):
        path = _write(tmp_path / "Legacy" / "Thing.php", "<?php")
        locator = ClassLocator.from_composer(str(tmp_path))
        assert locator.locate("Legacy\\Thing") == str(path)

    def test_from_composer_invalid_json(self, tmp_path):
        (tmp_path / "composer.json").write_text("{not json")
        with pytest.raises(ConfigError):
            ClassLocator.from_composer(str(tmp_path))
