from __future__ import annotations

import html
from functools import lru_cache
from pathlib import Path
from typing import Optional

import markdown
from pygments.formatters import HtmlFormatter

from .config import SiteConfig, SiteSearchConfig
from .content import DEFAULT_PAGE_TYPE, Page
from .sidebar import SidebarNode, compute_breadcrumbs, sidebar_path_for

TEMPLATES_DIR = Path(__file__).parent / "templates"
NO_ORIGIN = "https://NO-ORIGIN"
TOC_DEPTH = "2-6"
LATE_KEYS = ("content", "sidebar", "breadcrumbs", "toc", "footer")

BASE_STYLES = """
body { margin: 0; font-family: system-ui, sans-serif; line-height: 1.5; }
.layout { display: flex; min-height: 100vh; }
.sidebar { width: 16rem; padding: 1rem; border-right: 1px solid #ddd; }
.sidebar ul { list-style: none; padding-left: 1rem; margin: 0; }
.sidebar a.active { font-weight: bold; }
.content { flex: 1; max-width: 48rem; padding: 1rem 2rem; }
.toc { width: 14rem; padding: 1rem; font-size: 0.9rem; }
.breadcrumbs { font-size: 0.9rem; color: #666; }
.codehilite { padding: 0.5rem; overflow-x: auto; }
""".strip()

DOCSEARCH_CSS = '<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/@docsearch/css@3">'
DOCSEARCH_SCRIPT = """<div id="docsearch"></div>
<script src="https://cdn.jsdelivr.net/npm/@docsearch/js@3"></script>
<script>docsearch({{ container: '#docsearch', appId: '{app_id}', indexName: '{index_name}', apiKey: '{api_key}' }});</script>"""


def render_template(template: str, **context: str) -> str:
    output = template
    for key, value in context.items():
        if key in LATE_KEYS:
            continue
        output = output.replace(f"{{{{{key}}}}}", value)
    for key in LATE_KEYS:
        if key in context:
            output = output.replace(f"{{{{{key}}}}}", context[key])
    return output


@lru_cache(maxsize=None)
def read_template(name: str = "base.html") -> str:
    return (TEMPLATES_DIR / name).read_text(encoding="utf-8")


@lru_cache(maxsize=1)
def code_styles() -> str:
    return HtmlFormatter(style="default").get_style_defs(".codehilite")


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def convert_markdown(text: str) -> tuple[str, list[dict]]:
    md = markdown.Markdown(
        extensions=["fenced_code", "tables", "toc", "codehilite"],
        extension_configs={
            "toc": {"toc_depth": TOC_DEPTH},
            "codehilite": {"guess_lang": False, "css_class": "codehilite"},
        },
    )
    html_content = md.convert(text)
    return html_content, list(md.toc_tokens)


def build_sidebar_html(node: SidebarNode, current_path: str) -> str:
    current = sidebar_path_for(current_path)

    def render_children(children: tuple[SidebarNode, ...]) -> str:
        if not children:
            return ""
        items = []
        for child in children:
            css_class = ' class="active"' if child.path == current else ""
            items.append(
                f'<li><a{css_class} href="{html.escape(child.path)}">{html.escape(child.title)}</a>'
                f"{render_children(child.children)}</li>"
            )
        return "<ul>" + "".join(items) + "</ul>"

    css_class = ' class="active"' if node.path == current else ""
    return (
        f'<a{css_class} href="{html.escape(node.path)}">{html.escape(node.title)}</a>'
        + render_children(node.children)
    )


def build_breadcrumbs_html(sidebar: SidebarNode, path: str) -> str:
    crumbs = compute_breadcrumbs(sidebar, path)
    if not crumbs:
        return ""
    links = [f'<a href="{html.escape(node.path)}">{html.escape(node.title)}</a>' for node in crumbs]
    return '<div class="breadcrumbs">' + " / ".join(links) + "</div>"


def build_toc_html(tokens: list[dict]) -> str:
    def render(items: list[dict]) -> str:
        if not items:
            return ""
        parts = []
        for item in items:
            parts.append(
                f'<li><a href="#{html.escape(item["id"])}">{html.escape(html.unescape(item["name"]))}</a>'
                f'{render(item.get("children", []))}</li>'
            )
        return "<ul>" + "".join(parts) + "</ul>"

    # level-1 headings are the page title, start below them
    flattened: list[dict] = []
    for token in tokens:
        if token["level"] == 1:
            flattened.extend(token.get("children", []))
        else:
            flattened.append(token)
    if not flattened:
        return ""
    return '<aside class="toc"><h3>On this page</h3>' + render(flattened) + "</aside>"


def build_head_html(
    title: str,
    description: str,
    url: str,
    origin: str,
    config: SiteConfig,
    manifest_path: Optional[str],
) -> str:
    metadata = config.site_metadata
    esc = html.escape
    image = metadata.image
    image_url = f"{origin}{image}" if image and image.startswith("/") else image
    lines = [
        f'<meta property="og:title" content="{esc(title)}">',
        f'<meta property="og:description" content="{esc(description)}">',
    ]
    if image_url:
        lines.append(f'<meta property="og:image" content="{esc(image_url)}">')
        if metadata.image_alt:
            lines.append(f'<meta property="og:image:alt" content="{esc(metadata.image_alt)}">')
    lines.append('<meta property="og:locale" content="en_US">')
    lines.append('<meta property="og:type" content="website">')
    if image_url:
        lines.append('<meta name="twitter:card" content="summary_large_image">')
    if metadata.twitter_username:
        lines.append(f'<meta name="twitter:site" content="{esc(metadata.twitter_username)}">')
    lines.append(f'<meta property="og:url" content="{esc(url)}">')
    lines.append(f'<link rel="canonical" href="{esc(url)}">')
    if metadata.favicon_ico:
        lines.append(f'<link rel="icon" href="{esc(metadata.favicon_ico)}">')
    if metadata.favicon_svg:
        lines.append(f'<link rel="icon" href="{esc(metadata.favicon_svg)}" type="image/svg+xml">')
    if metadata.favicon_mask_svg and metadata.favicon_mask_color:
        lines.append(
            f'<link rel="mask-icon" href="{esc(metadata.favicon_mask_svg)}" '
            f'color="{esc(metadata.favicon_mask_color)}">'
        )
    if manifest_path:
        lines.append(f'<link rel="manifest" href="{esc(manifest_path)}">')
    if config.theme_color_dark:
        lines.append(
            f'<meta name="theme-color" content="{esc(config.theme_color_dark)}" '
            'media="(prefers-color-scheme: dark)">'
        )
    if config.theme_color:
        lines.append(f'<meta name="theme-color" content="{esc(config.theme_color)}">')
    if config.search:
        lines.append(DOCSEARCH_CSS)
    return "\n".join(lines)


def build_docsearch_script(search: Optional[SiteSearchConfig]) -> str:
    if search is None:
        return ""
    return DOCSEARCH_SCRIPT.format(
        app_id=html.escape(search.app_id),
        index_name=html.escape(search.index_name),
        api_key=html.escape(search.api_key),
    )


def build_footer_html(config: SiteConfig, content_repo_path: Optional[str]) -> str:
    if not config.content_repo or not content_repo_path:
        return ""
    href = f"https://github.com/{config.content_repo}/edit/HEAD{content_repo_path}"
    return f'<a class="edit-link" href="{html.escape(href)}">Edit this page on GitHub</a>'


def build_product_link_html(config: SiteConfig) -> str:
    if not config.product_repo:
        return ""
    href = f"https://github.com/{config.product_repo}"
    return f'<a class="product-github" href="{html.escape(href)}" aria-label="GitHub">GitHub</a>'


def render_page(
    page: Page,
    *,
    path: str,
    config: SiteConfig,
    sidebar: SidebarNode,
    content_repo_path: Optional[str] = None,
    manifest_path: Optional[str] = None,
    local_origin: Optional[str] = None,
) -> str:
    """Render one markdown page into a complete HTML document."""
    metadata = config.site_metadata
    title = f"{page.title_resolved} · {metadata.title}"
    description = page.front_matter.summary or metadata.description
    origin = local_origin or metadata.origin or NO_ORIGIN
    url = origin + path

    content_html, toc_tokens = convert_markdown(page.markdown)
    page_type = page.front_matter.type or DEFAULT_PAGE_TYPE
    toc_html = build_toc_html(toc_tokens) if page_type == DEFAULT_PAGE_TYPE else ""

    return render_template(
        read_template(),
        title=html.escape(title),
        description=html.escape(description),
        head=build_head_html(title, description, url, origin, config, manifest_path),
        styles=BASE_STYLES + "\n" + code_styles(),
        page_type=html.escape(page_type),
        product=html.escape(config.product),
        product_link=build_product_link_html(config),
        scripts=build_docsearch_script(config.search),
        sidebar=build_sidebar_html(sidebar, path),
        breadcrumbs=build_breadcrumbs_html(sidebar, path),
        content=content_html,
        toc=toc_html,
        footer=build_footer_html(config, content_repo_path),
    )
