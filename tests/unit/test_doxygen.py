"""Unit tests for the Doxygen HTML extractor."""

import pytest

from typelink.core.exceptions import DocumentParseError
from typelink.core.models import Visibility
from typelink.documents import DoxygenExtractor, SourceDocument, class_page_name, escape_name
from typelink.documents.doxygen import parse_parameter, split_parameters

WINDOW_PAGE = """
<html><body>
<div class="header"><div class="headertitle"><div class="title">KWin::Window Class Reference</div></div></div>
<div class="contents">
<table class="memberdecls">
<tr class="heading"><td colspan="2"><h2 class="groupheader"><a id="pub-types" name="pub-types"></a>Public Types</h2></td></tr>
<tr class="memitem:e1"><td class="memItemLeft" align="right">enum &#160;</td>
<td class="memItemRight"><a class="el" href="#e1">Type</a> { <a>Normal</a> = 0, <a>Dialog</a> }</td></tr>
<tr class="memdesc:e1"><td class="mdescLeft">&#160;</td><td class="mdescRight">Window types.</td></tr>
</table>
<table class="memberdecls">
<tr class="heading"><td colspan="2"><h2 class="groupheader"><a id="properties" name="properties"></a>Properties</h2></td></tr>
<tr class="memitem:p1"><td class="memItemLeft" align="right">QString&#160;</td>
<td class="memItemRight"><a class="el" href="#p1">caption</a></td></tr>
<tr class="memitem:p2"><td class="memItemLeft" align="right"><a class="el" href="class_k_win_1_1_output.html">KWin::Output</a> *&#160;</td>
<td class="memItemRight"><a class="el" href="#p2">output</a></td></tr>
<tr class="memdesc:p2"><td class="mdescLeft">&#160;</td><td class="mdescRight">Output the window is on.</td></tr>
</table>
<table class="memberdecls">
<tr class="heading"><td colspan="2"><h2 class="groupheader"><a id="pub-slots" name="pub-slots"></a>Public Slots</h2></td></tr>
<tr class="memitem:s1"><td class="memItemLeft" align="right">void&#160;</td>
<td class="memItemRight"><a class="el" href="#s1">closeWindow</a> ()</td></tr>
</table>
<table class="memberdecls">
<tr class="heading"><td colspan="2"><h2 class="groupheader"><a id="signals" name="signals"></a>Signals</h2></td></tr>
<tr class="memitem:g1"><td class="memItemLeft" align="right">void&#160;</td>
<td class="memItemRight"><a class="el" href="#g1">outputChanged</a> (<a class="el" href="class_k_win_1_1_output.html">KWin::Output</a> *output)</td></tr>
</table>
<table class="memberdecls">
<tr class="heading"><td colspan="2"><h2 class="groupheader"><a id="pub-methods" name="pub-methods"></a>Public Member Functions</h2></td></tr>
<tr class="memitem:m1"><td class="memItemLeft" align="right">Q_INVOKABLE QRect&#160;</td>
<td class="memItemRight"><a class="el" href="#m1">frameGeometry</a> () const</td></tr>
<tr class="memdesc:m1"><td class="mdescLeft">&#160;</td><td class="mdescRight">Geometry including decoration.</td></tr>
<tr class="memitem:m2"><td class="memItemLeft" align="right">void&#160;</td>
<td class="memItemRight"><a class="el" href="#m2">move</a> (const QPoint &amp;pos, bool animate=false)</td></tr>
<tr class="inherit_header pub_methods_class_k_win_1_1_item"><td colspan="2">Public Member Functions inherited from <a class="el" href="class_k_win_1_1_item.html">KWin::Item</a></td></tr>
</table>
<table class="memberdecls">
<tr class="heading"><td colspan="2"><h2 class="groupheader"><a id="pro-methods" name="pro-methods"></a>Protected Member Functions</h2></td></tr>
<tr class="memitem:m3"><td class="memItemLeft" align="right">virtual void&#160;</td>
<td class="memItemRight"><a class="el" href="#m3">doMove</a> (int, int) override</td></tr>
</table>
<div class="textblock"><p>A managed client window.</p></div>
<a id="p1"></a>
<div class="memitem"><div class="memproto"><table class="memname"><tr><td class="memname">QString KWin::Window::caption</td></tr></table>
<span class="mlabels"><span class="mlabel">read</span></span></div></div>
<a id="p2"></a>
<div class="memitem"><div class="memproto"><table class="memname"><tr><td class="memname">KWin::Output* KWin::Window::output</td></tr></table>
<span class="mlabels"><span class="mlabel">read</span><span class="mlabel">write</span></span></div></div>
<a id="e1"></a>
<div class="memitem"><div class="memproto"><table class="memname"><tr><td class="memname">enum KWin::Window::Type</td></tr></table></div>
<div class="memdoc"><table class="fieldtable">
<tr><th colspan="2">Enumerator</th></tr>
<tr><td class="fieldname">Normal</td><td class="fielddoc">Regular top-level window</td></tr>
<tr><td class="fieldname">Dialog</td><td class="fielddoc"></td></tr>
</table></div></div>
</div>
</body></html>
"""

NAMESPACE_PAGE = """
<html><body>
<div class="title">KWin Namespace Reference</div>
<table class="memberdecls">
<tr class="heading"><td colspan="2"><h2 class="groupheader"><a id="enum-members" name="enum-members"></a>Enumerations</h2></td></tr>
<tr class="memitem:n1"><td class="memItemLeft" align="right">enum &#160;</td>
<td class="memItemRight"><a class="el" href="#n1">Layer</a> { <a>DesktopLayer</a>, <a>NormalLayer</a> }</td></tr>
</table>
<a id="n2"></a>
<div class="memitem"><div class="memproto"><table class="memname"><tr><td class="memname">enum KWin::Edge</td></tr></table></div>
<div class="memdoc"><table class="fieldtable">
<tr><th colspan="2">Enumerator</th></tr>
<tr><td class="fieldname">Top</td><td class="fielddoc">Top edge</td></tr>
<tr><td class="fieldname">Bottom</td><td class="fielddoc">Bottom edge</td></tr>
</table></div></div>
</body></html>
"""


def make_document(content: str, source: str = "docs/class_k_win_1_1_window.html") -> SourceDocument:
    return SourceDocument.from_string(content, source)


@pytest.fixture
def extractor() -> DoxygenExtractor:
    """Create an extractor keeping every member."""
    return DoxygenExtractor()


class TestDeclarationExtraction:
    """Tests for class page extraction."""

    def test_title(self, extractor: DoxygenExtractor) -> None:
        """Test that name and namespace come from the title."""
        declaration = extractor.extract_declaration(make_document(WINDOW_PAGE))
        assert declaration is not None
        assert declaration.name == "Window"
        assert declaration.namespace == "KWin"
        assert declaration.full_name == "KWin::Window"
        assert declaration.description == "A managed client window."
        assert not declaration.is_abstract

    def test_methods_by_visibility(self, extractor: DoxygenExtractor) -> None:
        """Test public and protected methods."""
        declaration = extractor.extract_declaration(make_document(WINDOW_PAGE))
        methods = {m.name: m for m in declaration.methods}
        assert set(methods) == {"frameGeometry", "move", "doMove"}

        frame = methods["frameGeometry"]
        assert frame.return_type == "QRect"
        assert frame.is_const
        assert frame.decorators == ["Q_INVOKABLE"]
        assert frame.description == "Geometry including decoration."

        do_move = methods["doMove"]
        assert do_move.visibility == Visibility.PROTECTED
        assert do_move.is_virtual
        assert do_move.is_override
        assert [p.name for p in do_move.parameters] == ["arg1", "arg2"]

    def test_method_parameters(self, extractor: DoxygenExtractor) -> None:
        """Test parameter names, types, and defaults."""
        declaration = extractor.extract_declaration(make_document(WINDOW_PAGE))
        move = next(m for m in declaration.methods if m.name == "move")
        pos, animate = move.parameters
        assert (pos.name, pos.type) == ("pos", "const QPoint &")
        assert (animate.name, animate.type, animate.default_value) == ("animate", "bool", "false")

    def test_slots_and_signals(self, extractor: DoxygenExtractor) -> None:
        """Test slot and signal sections."""
        declaration = extractor.extract_declaration(make_document(WINDOW_PAGE))
        assert [s.name for s in declaration.slots] == ["closeWindow"]

        (signal,) = declaration.signals
        assert signal.name == "outputChanged"
        assert signal.return_type == "void"
        assert signal.decorators == ["signal"]
        assert signal.parameters[0].type == "KWin::Output *"

    def test_properties(self, extractor: DoxygenExtractor) -> None:
        """Test property types and the readonly flag from detail labels."""
        declaration = extractor.extract_declaration(make_document(WINDOW_PAGE))
        properties = {p.name: p for p in declaration.properties}
        assert properties["caption"].type == "QString"
        assert properties["caption"].readonly
        assert properties["output"].type == "KWin::Output *"
        assert not properties["output"].readonly
        assert properties["output"].description == "Output the window is on."

    def test_quoted_anchor(self, extractor: DoxygenExtractor) -> None:
        """Test that quotes in member anchors do not break detail lookup."""
        page = WINDOW_PAGE.replace('href="#p1"', "href=\"#it's\"").replace(
            '<a id="p1">', "<a id=\"it's\">"
        )
        declaration = extractor.extract_declaration(make_document(page))
        properties = {p.name: p for p in declaration.properties}
        assert properties["caption"].readonly
        assert not properties["output"].readonly

    def test_inheritance_from_headers(self, extractor: DoxygenExtractor) -> None:
        """Test that parents come from inherited member headers."""
        declaration = extractor.extract_declaration(make_document(WINDOW_PAGE))
        assert declaration.inheritance == ["KWin::Item"]

    def test_inheritance_from_text(self, extractor: DoxygenExtractor) -> None:
        """Test the Inherits fallback."""
        page = """
        <html><body><div class="title">Effect Class Reference</div>
        <div class="textblock"><p>Inherits QObject, KWin::Plugin.</p></div></body></html>
        """
        declaration = extractor.extract_declaration(make_document(page))
        assert declaration.inheritance == ["QObject", "KWin::Plugin"]

    def test_enums_merge_details(self, extractor: DoxygenExtractor) -> None:
        """Test enum values with descriptions from the field table."""
        declaration = extractor.extract_declaration(make_document(WINDOW_PAGE))
        (enum,) = declaration.enums
        assert enum.name == "Type"
        assert enum.description == "Window types."
        assert [(v.name, v.value) for v in enum.values] == [("Normal", "0"), ("Dialog", None)]
        assert enum.values[0].description == "Regular top-level window"
        assert enum.values[1].description is None

    def test_abstract_title(self, extractor: DoxygenExtractor) -> None:
        """Test that an abstract marker in the title is stripped and recorded."""
        page = '<html><body><div class="title">KWin::Effect Class Reference abstract</div></body></html>'
        declaration = extractor.extract_declaration(make_document(page))
        assert declaration.full_name == "KWin::Effect"
        assert declaration.is_abstract

    def test_scriptable_only(self) -> None:
        """Test filtering to Q_INVOKABLE members."""
        declaration = DoxygenExtractor(scriptable_only=True).extract_declaration(
            make_document(WINDOW_PAGE)
        )
        assert [m.name for m in declaration.methods] == ["frameGeometry"]
        assert declaration.slots == []

    def test_non_class_page(self, extractor: DoxygenExtractor) -> None:
        """Test that pages without a class title yield None."""
        page = '<html><body><div class="title">Main Page</div></body></html>'
        assert extractor.extract_declaration(make_document(page)) is None


class TestNamespaceExtraction:
    """Tests for namespace page extraction."""

    def test_namespace_enums(self, extractor: DoxygenExtractor) -> None:
        """Test enums from declarations and detail-only field tables."""
        info = extractor.extract_namespace(make_document(NAMESPACE_PAGE, "docs/namespace_k_win.html"))
        assert info is not None
        assert info.name == "KWin"
        enums = {e.name: e for e in info.enums}
        assert [v.name for v in enums["Layer"].values] == ["DesktopLayer", "NormalLayer"]
        assert [v.description for v in enums["Edge"].values] == ["Top edge", "Bottom edge"]

    def test_class_page_is_not_namespace(self, extractor: DoxygenExtractor) -> None:
        """Test that class pages yield no namespace."""
        assert extractor.extract_namespace(make_document(WINDOW_PAGE)) is None


class TestSourceDocument:
    """Tests for SourceDocument."""

    def test_type_links(self) -> None:
        """Test that only links to type pages are returned."""
        links = make_document(WINDOW_PAGE).type_links()
        assert ("KWin::Output", "class_k_win_1_1_output.html") in links
        assert ("KWin::Item", "class_k_win_1_1_item.html") in links
        assert all(not href.startswith("#") for _, href in links)

    def test_empty_document(self) -> None:
        """Test that empty content raises DocumentParseError."""
        with pytest.raises(DocumentParseError, match="Empty document"):
            SourceDocument.from_string("   ", "empty.html")


class TestHelpers:
    """Tests for Doxygen naming and parameter helpers."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("KWin::Window", "_k_win_1_1_window"),
            ("my_type", "my__type"),
            ("QObject", "_q_object"),
        ],
    )
    def test_escape_name(self, name: str, expected: str) -> None:
        """Test Doxygen file name escaping."""
        assert escape_name(name) == expected

    def test_class_page_name(self) -> None:
        """Test page file names."""
        assert class_page_name("KWin::Window") == "class_k_win_1_1_window.html"

    def test_split_parameters_respects_nesting(self) -> None:
        """Test that commas inside generics do not split."""
        assert split_parameters("QMap<int, QString> map, int (*fn)(int, int)") == [
            "QMap<int, QString> map",
            "int (*fn)(int, int)",
        ]

    def test_parse_parameter(self) -> None:
        """Test parameters with and without names."""
        param = parse_parameter("const QString &name = QString()", 1)
        assert (param.name, param.type, param.default_value) == ("name", "const QString &", "QString()")
        assert parse_parameter("QString", 2).name == "arg2"
        assert parse_parameter("void", 1) is None
