"""HTML page rendering for the browsing client."""

from __future__ import annotations

import json
from html import escape
from textwrap import dedent
from typing import Any

from .config import Settings


PAGE_TEMPLATE = dedent(
    """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>__APP_NAME__</title>
    <style>
        :root {
            color-scheme: dark;
            font-family: 'Inter', 'Segoe UI', system-ui, -apple-system, sans-serif;
            --bg: #0f0f13;
            --bg-card: #1a1a21;
            --text-primary: #f5f5f5;
            --text-secondary: #a9a9b2;
            --accent: #e50914;
            --error: #ff5c5c;
            background: var(--bg);
            color: var(--text-primary);
        }
        body { margin: 0; min-height: 100vh; }
        main { max-width: 1100px; margin: 0 auto; padding: 2rem 1.5rem 4rem; }
        .hidden { display: none !important; }
        .btn {
            border: none;
            border-radius: 999px;
            padding: 0.6rem 1.2rem;
            cursor: pointer;
            font-weight: 600;
        }
        .btn-primary { background: var(--accent); color: #fff; }
        .btn-secondary { background: #2c2c34; color: var(--text-primary); }
        .grid {
            display: grid;
            gap: 1.25rem;
            grid-template-columns: repeat(auto-fill, minmax(180px, 1fr));
        }
        .card {
            background: var(--bg-card);
            border-radius: 14px;
            overflow: hidden;
            cursor: pointer;
        }
        .card img { width: 100%; display: block; }
        .card-content { padding: 0.75rem; }
        .card-meta { display: flex; justify-content: space-between; color: var(--text-secondary); }
        .timeline-item { display: flex; gap: 1rem; margin-bottom: 1rem; }
        .timeline-item img { width: 100px; border-radius: 8px; }
        .muted { color: var(--text-secondary); text-align: center; }
        .overlay {
            position: fixed;
            inset: 0;
            background: rgba(0, 0, 0, 0.75);
            display: none;
            align-items: center;
            justify-content: center;
        }
        .overlay.active { display: flex; }
        .dialog { background: var(--bg-card); border-radius: 16px; padding: 1.5rem; max-width: 420px; }
        .dialog h3.error { color: var(--error); }
        .trailer-frame { width: min(960px, 92vw); aspect-ratio: 16 / 9; border: 0; }
    </style>
</head>
<body>
    <main>
        <section id="search-section">
            <h1>__APP_NAME__</h1>
            <form id="search-form">
                <input id="search-input" type="search" placeholder="Search movies or series" />
                <button class="btn btn-primary" type="submit">Search</button>
            </form>
            <p class="muted">
                Try:
                <button class="btn btn-secondary quick" data-term="Harry Potter">Harry Potter</button>
                <button class="btn btn-secondary quick" data-term="Star Wars">Star Wars</button>
                <button class="btn btn-secondary quick" data-term="Matrix">Matrix</button>
            </p>
        </section>

        <section id="results-section" class="hidden">
            <button class="btn btn-secondary" data-intent='{"type": "new-search"}'>New search</button>
            <h2><span id="results-heading"></span> <span id="results-count">0</span></h2>
            <div id="results-grid" class="grid"></div>
        </section>

        <section id="series-detail-section" class="hidden">
            <button class="btn btn-secondary" data-intent='{"type": "back-to-results"}'>← Back to Results</button>
            <div id="series-info"></div>
            <div id="movie-list"></div>
        </section>

        <section id="movie-detail-section" class="hidden">
            <button class="btn btn-secondary" id="back-from-movie-btn"></button>
            <div id="movie-details-container"></div>
        </section>
    </main>

    <div id="loading-overlay" class="overlay"><p>Loading…</p></div>

    <div id="custom-alert" class="overlay" data-overlay="alert">
        <div class="dialog">
            <h3 id="alert-title"></h3>
            <p id="alert-message"></p>
            <button class="btn btn-primary" data-intent='{"type": "close-alert"}'>OK</button>
        </div>
    </div>

    <div id="trailer-modal" class="overlay" data-overlay="trailer">
        <iframe id="trailer-iframe" class="trailer-frame" allow="autoplay; encrypted-media" allowfullscreen></iframe>
    </div>

    <script>
        (function () {
            let state = __STATE_JSON__;
            const sections = {
                'search': document.getElementById('search-section'),
                'results': document.getElementById('results-section'),
                'series-detail': document.getElementById('series-detail-section'),
                'movie-detail': document.getElementById('movie-detail-section'),
            };

            function el(tag, attrs, text) {
                const node = document.createElement(tag);
                Object.entries(attrs || {}).forEach(([key, value]) => {
                    if (key === 'intent') {
                        node.dataset.intent = JSON.stringify(value);
                    } else if (value !== null && value !== undefined) {
                        node.setAttribute(key, value);
                    }
                });
                if (text !== undefined) {
                    node.textContent = text;
                }
                return node;
            }

            async function dispatch(intent) {
                const response = await fetch('/api/intents', {
                    method: 'POST',
                    headers: { 'Content-Type': 'application/json' },
                    body: JSON.stringify(intent),
                });
                if (response.ok) {
                    state = await response.json();
                    render();
                }
            }

            function renderResults(results) {
                const grid = document.getElementById('results-grid');
                grid.replaceChildren();
                document.getElementById('results-heading').textContent = results ? results.heading : '';
                document.getElementById('results-count').textContent = results ? String(results.count) : '0';
                if (!results) {
                    return;
                }
                if (results.message) {
                    grid.appendChild(el('p', { class: 'muted' }, results.message));
                }
                results.cards.forEach((card) => {
                    const node = el('div', { class: 'card', intent: card.intent });
                    node.appendChild(el('img', { src: card.poster_url, alt: 'Poster of ' + card.title, loading: 'lazy' }));
                    const content = el('div', { class: 'card-content' });
                    content.appendChild(el('h3', {}, card.title));
                    const meta = el('div', { class: 'card-meta' });
                    meta.appendChild(el('span', {}, '📅 ' + card.year));
                    meta.appendChild(el('span', {}, '★ ' + card.rating + ' · ' + card.label));
                    content.appendChild(meta);
                    node.appendChild(content);
                    grid.appendChild(node);
                });
            }

            function renderSeries(series) {
                const info = document.getElementById('series-info');
                const list = document.getElementById('movie-list');
                info.replaceChildren();
                list.replaceChildren();
                if (!series) {
                    return;
                }
                if (series.message) {
                    list.appendChild(el('p', { class: 'muted' }, series.message));
                }
                if (series.header) {
                    info.appendChild(el('img', { src: series.header.poster_url, alt: 'Poster of ' + series.header.name, width: 250 }));
                    info.appendChild(el('h2', {}, series.header.name));
                    info.appendChild(el('p', {}, series.header.overview));
                    info.appendChild(el('p', {}, '🎬 ' + series.header.part_count + ' Movies'));
                }
                series.entries.forEach((entry) => {
                    const item = el('div', { class: 'timeline-item' });
                    item.appendChild(el('img', { src: entry.poster_url, alt: 'Poster of ' + entry.title }));
                    const body = el('div', {});
                    body.appendChild(el('h3', {}, entry.title));
                    body.appendChild(el('p', {}, 'Release Year: ' + entry.release_year));
                    body.appendChild(el('button', { class: 'btn btn-primary', intent: entry.trailer_intent }, '▶ Trailer'));
                    body.appendChild(el('button', { class: 'btn btn-secondary', intent: entry.details_intent }, 'Details'));
                    item.appendChild(body);
                    list.appendChild(item);
                });
            }

            function renderMovie(movie) {
                const container = document.getElementById('movie-details-container');
                const back = document.getElementById('back-from-movie-btn');
                container.replaceChildren();
                if (!movie) {
                    return;
                }
                back.textContent = movie.back.label;
                back.dataset.intent = JSON.stringify(movie.backIntent);
                if (movie.message) {
                    container.appendChild(el('p', { class: 'muted' }, movie.message));
                    return;
                }
                container.appendChild(el('img', { src: movie.poster_url, alt: 'Poster of ' + movie.title, width: 300 }));
                container.appendChild(el('h2', {}, movie.title));
                container.appendChild(el('p', { class: 'tagline' }, movie.tagline));
                container.appendChild(el('p', {}, movie.overview));
                container.appendChild(el('p', {}, 'Release Date: ' + movie.release_date));
                container.appendChild(el('p', {}, 'Genre: ' + movie.genres));
                container.appendChild(el('p', {}, 'Rating: ⭐ ' + movie.rating + '/10'));
                container.appendChild(el('p', {}, 'Runtime: ' + movie.runtime));
                const providers = movie.providers;
                if (providers.message) {
                    container.appendChild(el('p', {}, providers.message));
                }
                [['Stream on', providers.stream], ['Buy on', providers.buy], ['Rent on', providers.rent]].forEach(([label, names]) => {
                    if (names) {
                        container.appendChild(el('p', {}, label + ': ' + names));
                    }
                });
                if (movie.trailer_key) {
                    container.appendChild(el('button', {
                        class: 'btn btn-primary',
                        intent: { type: 'play-trailer', videoKey: movie.trailer_key },
                    }, '▶ Watch Trailer'));
                }
                container.appendChild(el('button', { class: 'btn btn-secondary', intent: movie.backIntent }, 'Back'));
            }

            function renderOverlays(overlays) {
                document.getElementById('loading-overlay').classList.toggle('active', overlays.loading);
                const alertBox = document.getElementById('custom-alert');
                const title = document.getElementById('alert-title');
                if (overlays.alert) {
                    title.textContent = overlays.alert.title;
                    title.classList.toggle('error', overlays.alert.severity === 'error');
                    document.getElementById('alert-message').textContent = overlays.alert.message;
                }
                alertBox.classList.toggle('active', Boolean(overlays.alert));
                const frame = document.getElementById('trailer-iframe');
                const embed = overlays.trailer ? overlays.trailer.embedUrl : '';
                if (frame.getAttribute('src') !== embed) {
                    frame.setAttribute('src', embed);
                }
                document.getElementById('trailer-modal').classList.toggle('active', Boolean(overlays.trailer));
            }

            function render() {
                Object.entries(sections).forEach(([name, section]) => {
                    section.classList.toggle('hidden', !state.visibility[name]);
                });
                document.getElementById('search-input').value = state.searchInput;
                renderResults(state.results);
                renderSeries(state.series);
                renderMovie(state.movie);
                renderOverlays(state.overlays);
                window.scrollTo(0, state.scrollTop);
            }

            document.addEventListener('click', (event) => {
                const overlay = event.target.dataset ? event.target.dataset.overlay : null;
                if (overlay) {
                    dispatch({ type: 'dismiss-overlay', overlay: overlay });
                    return;
                }
                const source = event.target.closest('[data-intent]');
                if (source) {
                    event.stopPropagation();
                    dispatch(JSON.parse(source.dataset.intent));
                    return;
                }
                const chip = event.target.closest('.quick');
                if (chip) {
                    dispatch({ type: 'quick-search', term: chip.dataset.term });
                }
            });

            document.getElementById('search-form').addEventListener('submit', (event) => {
                event.preventDefault();
                dispatch({ type: 'submit-search', query: document.getElementById('search-input').value });
            });

            document.addEventListener('keydown', (event) => {
                if (event.key === 'Escape') {
                    dispatch({ type: 'cancel' });
                }
            });

            render();
        })();
    </script>
</body>
</html>
    """
)


def render_page(settings: Settings, snapshot: dict[str, Any]) -> str:
    """Return the full HTML page bootstrapped with a session snapshot."""

    state_json = json.dumps(snapshot).replace("</", "<\\/")

    html = PAGE_TEMPLATE
    replacements = {
        "__APP_NAME__": escape(settings.app_name),
        "__STATE_JSON__": state_json,
    }
    for placeholder, value in replacements.items():
        html = html.replace(placeholder, value)
    return html
