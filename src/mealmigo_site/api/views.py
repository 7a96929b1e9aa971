"""Server-rendered landing page sections."""

from html import escape

from mealmigo_site.domain.content import (
    AppRating,
    ContentView,
    Feature,
    HeroContent,
    Plan,
    Step,
)


def _stars(rating: float) -> str:
    full = max(0, min(5, round(rating)))
    return "★" * full + "☆" * (5 - full)


def render_hero(hero: HeroContent) -> str:
    if hero.mediaType == "video" and hero.videoURL:
        media = (
            f'<video src="{escape(hero.videoURL)}" autoplay muted loop playsinline>'
            "</video>"
        )
    elif hero.imageURL:
        media = f'<img src="{escape(hero.imageURL)}" alt="{escape(hero.title1)}" />'
    else:
        media = ""
    return (
        '<section id="hero" class="hero">'
        f"<h1>{escape(hero.title1)} <span>{escape(hero.title2)}</span></h1>"
        f"<p>{escape(hero.description)}</p>"
        f'<div class="hero-media">{media}</div>'
        '<a class="cta" href="/onboarding">Get started</a>'
        "</section>"
    )


def render_features(features: list[Feature]) -> str:
    cards = "".join(
        f'<article class="feature" data-icon="{escape(feature.icon)}">'
        f"<h3>{escape(feature.title)}</h3><p>{escape(feature.description)}</p>"
        "</article>"
        for feature in features
    )
    return f'<section id="features" class="features">{cards}</section>'


def render_how_it_works(steps: list[Step]) -> str:
    items = []
    for number, step in enumerate(steps, start=1):
        image = (
            f'<img src="{escape(step.image)}" alt="{escape(step.title)}" />'
            if step.image
            else ""
        )
        items.append(
            f'<li class="step"><span class="step-number">{number}</span>'
            f"<h3>{escape(step.title)}</h3><p>{escape(step.description)}</p>"
            f"{image}</li>"
        )
    return f'<section id="how-it-works"><ol>{"".join(items)}</ol></section>'


def render_pricing(plans: list[Plan]) -> str:
    cards = []
    for plan in plans:
        bullets = "".join(f"<li>{escape(item)}</li>" for item in plan.features)
        css = "plan featured" if plan.featured else "plan"
        cards.append(
            f'<article class="{css}"><h3>{escape(plan.name)}</h3>'
            f"<p>{escape(plan.description)}</p>"
            f'<p class="price">${plan.price:.2f}</p><ul>{bullets}</ul>'
            f"<button>{escape(plan.buttonText)}</button></article>"
        )
    return f'<section id="pricing" class="pricing">{"".join(cards)}</section>'


def render_testimonials(ratings: list[AppRating]) -> str:
    if not ratings:
        return '<section id="testimonials"><p>No testimonials yet.</p></section>'
    quotes = "".join(
        '<blockquote class="testimonial">'
        f'<span class="stars">{_stars(rating.rating)}</span>'
        f"<p>{escape(rating.text)}</p><cite>{escape(rating.name)}</cite>"
        "</blockquote>"
        for rating in ratings
    )
    return f'<section id="testimonials">{quotes}</section>'


def render_landing(view: ContentView, site_name: str = "MyMealMigo") -> str:
    """Render the full landing page document."""
    if view.isLoading:
        body = '<main class="loading"><p>Loading…</p></main>'
    else:
        body = (
            "<main>"
            + render_hero(view.hero)
            + render_features(view.features)
            + render_how_it_works(view.howItWorks)
            + render_pricing(view.pricing)
            + render_testimonials(view.testimonials)
            + "</main>"
        )
    return (
        '<!doctype html><html lang="en"><head><meta charset="utf-8" />'
        '<meta name="viewport" content="width=device-width, initial-scale=1" />'
        f"<title>{escape(site_name)}</title></head><body>{body}</body></html>"
    )
