#!/usr/bin/env python3
from typing import Dict

# Collects the page text plus every visible interactive element together with
# the nearest landmark section and a CSS selector for that section.
_CONTEXT_JS = """
(opts) => {
    const safeText = (el) => { try { return (el && el.innerText) ? String(el.innerText).trim() : ''; } catch(e){ return ''; } };
    const attr = (el, name) => { try { return el.getAttribute(name) || undefined; } catch(e){ return undefined; } };
    const visible = (el) => {
        try {
            const r = el.getBoundingClientRect();
            const s = window.getComputedStyle(el);
            return r.width > 0 && r.height > 0 && s.visibility !== 'hidden' && s.display !== 'none';
        } catch(e) { return false; }
    };
    const cssFor = (el) => {
        if (!el || el === document.body) return 'body';
        const tag = el.tagName.toLowerCase();
        if (el.id) return tag + '#' + CSS.escape(el.id);
        const cls = Array.from(el.classList || []).filter(c => /^[a-zA-Z][\\w-]*$/.test(c)).slice(0, 2);
        return cls.length ? tag + '.' + cls.join('.') : tag;
    };
    const SECTION = 'header, nav, main, aside, footer, section, form, dialog, [role=banner], [role=navigation], [role=main], [role=complementary], [role=contentinfo], [role=dialog]';
    const sectionOf = (el) => {
        const s = el.parentElement ? el.parentElement.closest(SECTION) : null;
        if (!s) return { section: 'body', section_selector: 'body' };
        const label = attr(s, 'aria-label') || attr(s, 'role') || s.tagName.toLowerCase();
        return { section: label, section_selector: cssFor(s) };
    };
    const INTERACTIVE = 'a[href], button, input, select, textarea, summary, details, [role=button], [role=link], [role=tab], [role=menuitem], [role=switch], [role=checkbox], [role=combobox], [tabindex]:not([tabindex="-1"]), [contenteditable=true], [onclick]';
    const elements = [];
    for (const el of Array.from(document.querySelectorAll(INTERACTIVE))) {
        if (elements.length >= opts.maxElements) break;
        if (!visible(el)) continue;
        const sec = sectionOf(el);
        elements.push({
            tag: el.tagName.toLowerCase(),
            role: attr(el, 'role'),
            type: attr(el, 'type'),
            aria_label: attr(el, 'aria-label'),
            aria_expanded: attr(el, 'aria-expanded'),
            title: attr(el, 'title'),
            placeholder: attr(el, 'placeholder'),
            text: safeText(el).substring(0, 120) || undefined,
            href: attr(el, 'href'),
            section: sec.section,
            section_selector: sec.section_selector,
        });
    }
    const bodyText = (() => { try { return document.body ? document.body.innerText : ''; } catch(e){ return ''; } })();
    return {
        title: document.title,
        url: window.location.href,
        text: (bodyText || '').substring(0, opts.maxChars).trim(),
        interactive_elements: elements,
    };
}
"""


async def extract_page_context(page, dom_max_chars: int = 30000, max_elements: int = 300) -> Dict:
    """Snapshot of the page the extraction prompt is built from."""
    ctx = await page.evaluate(_CONTEXT_JS, {"maxChars": dom_max_chars, "maxElements": max_elements})
    if not isinstance(ctx, dict):
        return {"title": "", "url": getattr(page, "url", ""), "text": "", "interactive_elements": []}
    ctx.setdefault("interactive_elements", [])
    return ctx
