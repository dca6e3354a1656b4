"""AMP Transformer for converting Instant Articles into AMP HTML documents.

The AMPTransformer:
1. Builds the ``<html amp>`` skeleton and the head (boilerplate, canonical
   link, Schema.org metadata)
2. Builds the header, the article content and the footer into the body
3. Compiles the article style into CSS and fills the logo and date
4. Fills ``<style amp-custom>`` with the compiled rules and stylesheets
5. Inserts the configured analytics and the custom-element scripts
6. Serializes the tree as an AMP document

Example:
    transformer = AMPTransformer(ConversionProperties(lang="en-US"))
    result = transformer.transform(article)
    Path("article.amp.html").write_text(result.html)
"""

import json
import logging
import re
from pathlib import Path

import lxml.html
from lxml import etree

from schemas.article import TEXT_NODES, Article
from schemas.properties import ConversionProperties

from ..css import DEFAULT_PREFIX, StyleCompiler
from ..exceptions import InvalidArgumentError, InvalidFormatError
from ..extensions import ExtensionPoint, Observer
from ..media import MediaDimensionResolver
from .analytics import parse_analytics
from .context import Feature, RenderContext, plain_text
from .elements import BUILDERS, NODE_KINDS
from .header import build_footer, build_header, fill_date, fill_logo
from .metadata import build_schema_org, serialize_schema_org
from .transformer import ArticleTransformer, ConversionResult

logger = logging.getLogger(__name__)

# ia2amp/transformers/amp_transformer.py -> ia2amp/
PACKAGE_ROOT = Path(__file__).parent.parent
STYLES_DIR = PACKAGE_ROOT / "resources" / "styles"
STYLESHEETS_DIR = PACKAGE_ROOT / "resources" / "stylesheets"
GLOBAL_STYLESHEET = "amp.css"

DOCTYPE = "<!doctype html>"
AMP_RUNTIME_URL = "https://cdn.ampproject.org/v0.js"
VIEWPORT = "width=device-width,initial-scale=1,minimum-scale=1,maximum-scale=1,user-scalable=no"
BOILERPLATE_CSS = (
    "body{-webkit-animation:-amp-start 8s steps(1,end) 0s 1 normal both;"
    "-moz-animation:-amp-start 8s steps(1,end) 0s 1 normal both;"
    "-ms-animation:-amp-start 8s steps(1,end) 0s 1 normal both;"
    "animation:-amp-start 8s steps(1,end) 0s 1 normal both}"
    "@-webkit-keyframes -amp-start{from{visibility:hidden}to{visibility:visible}}"
    "@-moz-keyframes -amp-start{from{visibility:hidden}to{visibility:visible}}"
    "@-ms-keyframes -amp-start{from{visibility:hidden}to{visibility:visible}}"
    "@-o-keyframes -amp-start{from{visibility:hidden}to{visibility:visible}}"
    "@keyframes -amp-start{from{visibility:hidden}to{visibility:visible}}"
)
NOSCRIPT_BOILERPLATE_CSS = (
    "body{-webkit-animation:none;-moz-animation:none;-ms-animation:none;animation:none}"
)

# The HTML serializer writes empty attributes as name="", AMP wants them bare
BARE_ATTRIBUTES = re.compile(r'(\s)(amp|amp-custom|amp-boilerplate|async)=""')


class AMPTransformer(ArticleTransformer):
    """Transform Instant Articles into AMP HTML.

    Attributes:
        properties: Conversion options
        observer: Extension point registry handed to every conversion
        resolver: Shared media dimension resolver, or None to create one per
            conversion from the properties
        styles_dir: Directory containing ``<style>.style.json`` files
        stylesheets_dir: Directory containing the global stylesheet
    """

    def __init__(
        self,
        properties: ConversionProperties | None = None,
        observer: Observer | None = None,
        resolver: MediaDimensionResolver | None = None,
        styles_dir: Path | None = None,
        stylesheets_dir: Path | None = None,
    ):
        """Initialize the AMP transformer.

        Args:
            properties: Conversion options (defaults apply when omitted)
            observer: Extension point registry
            resolver: Media dimension resolver; not closed by the transformer
            styles_dir: Directory containing styles
                (default: the properties' styles folder, then resources/styles)
            stylesheets_dir: Directory containing the global stylesheet
                (default: resources/stylesheets)
        """
        self.properties = properties or ConversionProperties()
        self.observer = observer or Observer()
        self.resolver = resolver
        self.styles_dir = Path(styles_dir or self.properties.styles_folder or STYLES_DIR)
        self.stylesheets_dir = Path(stylesheets_dir or STYLESHEETS_DIR)

    def transform(self, article: Article | dict | str) -> ConversionResult:
        """Convert an article into an AMP document.

        Args:
            article: Article tree, or its dict or JSON form

        Returns:
            ConversionResult with the document, its custom CSS and warnings

        Raises:
            InvalidArgumentError: The article is not an article
        """
        article = self._load_article(article)
        logger.info(
            f"Converting article {article.canonical_url or '(no canonical URL)'} "
            f"with {len(article.children)} content nodes"
        )

        resolver = self.resolver or MediaDimensionResolver(self.properties.media_size_config())
        try:
            context = RenderContext(article, self.properties, resolver, self.observer)
            root, css = self._build_document(context)
        finally:
            if self.resolver is None:
                resolver.close()

        html = serialize(root)
        logger.info(
            f"Converted article with {len(context.warnings)} warning(s), "
            f"features: {', '.join(f.value for f in Feature if f in context.features) or 'none'}"
        )
        return ConversionResult(html=html, css=css, warnings=context.warnings)

    def _load_article(self, article) -> Article:
        if isinstance(article, Article):
            return article
        if isinstance(article, dict):
            return Article.model_validate(article)
        if isinstance(article, (str, bytes)):
            return Article.model_validate_json(article)
        raise InvalidArgumentError(
            f"Article expected, {type(article).__name__} informed.",
            expected="Article",
            actual=type(article).__name__,
        )

    def _build_document(self, context: RenderContext) -> tuple[etree._Element, str]:
        """Build the whole document tree.

        Returns:
            The ``<html>`` root and the custom CSS put in the head
        """
        article = context.article

        root = context.html.fill(etree.Element("html"))
        root.set("amp", "")
        if article.rtl:
            root.set("dir", "rtl")
        if self.properties.lang:
            root.set("lang", self.properties.lang)

        head = self._build_head(context, root)
        body = context.body.fill(etree.SubElement(root, "body"))

        build_header(context, article.header, body)
        content = context.article_body.fill(context.create_element("article", body, "article"))
        self._build_children(context, content)
        build_footer(context, article.footer, body)

        compiled = StyleCompiler(context.css, context.resolver, context.add_warning).compile(
            self._load_style(context)
        )
        fill_logo(context, compiled.logo)
        fill_date(context, compiled.date_format or self.properties.date_format)

        css = self._build_custom_css(context)
        context.custom_css.element.text = css

        self._add_analytics(context, body)
        self._add_feature_scripts(context, head)

        context.filter_element(ExtensionPoint.HEAD, head)
        root = context.filter_element(ExtensionPoint.HTML, root)
        return root, css

    def _build_head(self, context: RenderContext, root: etree._Element) -> etree._Element:
        article = context.article
        head = context.head.fill(etree.SubElement(root, "head"))

        etree.SubElement(head, "meta", charset=article.charset)
        etree.SubElement(head, "meta", name="viewport", content=VIEWPORT)
        etree.SubElement(head, "script", {"async": "", "src": AMP_RUNTIME_URL})

        boilerplate = etree.SubElement(head, "style", {"amp-boilerplate": ""})
        boilerplate.text = BOILERPLATE_CSS
        noscript = etree.SubElement(head, "noscript")
        etree.SubElement(noscript, "style", {"amp-boilerplate": ""}).text = NOSCRIPT_BOILERPLATE_CSS

        etree.SubElement(head, "link", rel="canonical", href=article.canonical_url)
        context.custom_css.fill(etree.SubElement(head, "style", {"amp-custom": ""}))

        schema_org = etree.SubElement(head, "script", type="application/ld+json")
        schema_org.text = serialize_schema_org(build_schema_org(context))

        etree.SubElement(head, "title").text = plain_text(article.header.title)
        return head

    def _build_children(self, context: RenderContext, container: etree._Element) -> None:
        """Render each content node, followed by its spacing divider."""
        for child in context.article.children:
            if isinstance(child, TEXT_NODES) and child.is_blank():
                logger.debug(f"Skipping blank {child.type}")
                continue

            builder = BUILDERS.get(type(child))
            if builder is None:
                logger.debug(f"No AMP builder for {type(child).__name__}, skipping it")
                continue

            element = builder(context, child, container)
            if element is None:
                continue
            element = context.filter_element(ExtensionPoint.ARTICLE_ITEM, element, child)
            if element is None:
                continue
            context.build_spacing_div(container, NODE_KINDS[type(child)])

    def _load_style(self, context: RenderContext) -> dict:
        """Load the style description for the article.

        Inline override styles take precedence over the styles folder.
        """
        if self.properties.override_styles is not None:
            return self.properties.override_styles

        path = self.styles_dir / f"{context.article.style}.style.json"
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            context.add_warning(f"Style file {path} not found, rendering without style.", str(path), e)
        except (OSError, json.JSONDecodeError) as e:
            context.add_warning(f"Could not load style file {path}: {e}", str(path), e)
        return {}

    def _build_custom_css(self, context: RenderContext) -> str:
        """Concatenate compiled rules, global and per-style stylesheets.

        The global stylesheet is written with the default class prefix,
        which is swapped for the conversion's prefix.
        """
        global_css = self._read_stylesheet(self.stylesheets_dir / GLOBAL_STYLESHEET)
        parts = [
            context.css.build(formatted=False),
            global_css.replace(f".{DEFAULT_PREFIX}", f".{context.prefix}"),
            self._read_stylesheet(self.styles_dir / f"{context.article.style}.style.css"),
        ]
        css = "".join(part.replace("\r", "").replace("\n", "") for part in parts)
        return context.observer.apply_filters(ExtensionPoint.CUSTOM_CSS, css, context)

    @staticmethod
    def _read_stylesheet(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            logger.debug(f"No stylesheet at {path}: {e}")
            return ""

    def _add_analytics(self, context: RenderContext, body: etree._Element) -> None:
        """Insert the configured analytics as the first body children.

        Either every markup string is valid and all are inserted, or none is.
        """
        if not self.properties.analytics:
            return
        try:
            elements = parse_analytics(self.properties.analytics)
        except InvalidFormatError as e:
            context.add_warning(
                f"Invalid analytics markup, discarding all analytics: {e.message}", e.value, e
            )
            return

        for index, element in enumerate(elements):
            body.insert(index, element)
        context.use_feature(Feature.ANALYTICS)

    def _add_feature_scripts(self, context: RenderContext, head: etree._Element) -> None:
        """Declare the used custom elements right after the AMP runtime."""
        runtime = head.find(f"script[@src='{AMP_RUNTIME_URL}']")
        index = head.index(runtime) + 1
        for feature in Feature:
            if feature not in context.features:
                continue
            script = etree.Element(
                "script",
                {"async": "", "custom-element": feature.value, "src": feature.script_src},
            )
            head.insert(index, script)
            index += 1


def serialize(root: etree._Element) -> str:
    """Serialize a document tree as AMP HTML."""
    html = lxml.html.tostring(root, method="html", encoding="unicode")
    return DOCTYPE + BARE_ATTRIBUTES.sub(r"\1\2", html)
