"""
A routed replica of the library application for offline runs.

Every document request under the base URL is fulfilled with one small page
that renders /login, /books, /add-book and /edit-book/<n> client-side and keeps
its records in localStorage. Markup mirrors the hosted application: inline
validation text, a searchable table, row Edit/Delete buttons and a
confirmation dialog.
"""
import json

from playwright.sync_api import Page, Route

from library_e2e.config import FAKE_BASE_URL

BOOKS_KEY = "library.books"

APP_HTML = """<!doctype html>
<html>
<head>
<meta charset="utf-8">
<title>Library System</title>
<style>
  .field-error, .error, .alert-danger { color: #b00020; }
  .modal { position: fixed; top: 30%; left: 35%; background: #fff; border: 1px solid #888; padding: 1em; }
</style>
</head>
<body>
<nav id="nav"></nav>
<main id="app"></main>
<script>
const BOOKS_KEY = "library.books";
const AUTH_KEY = "library.auth";
const GENRES = ["Fiction", "Non-Fiction", "Mystery", "Romance", "Thriller", "Fantasy", "Biography", "History"];
const LABELS = {title: "Title", author: "Author", isbn: "ISBN", genre: "Genre", publicationDate: "Publication Date", price: "Price"};

const app = document.getElementById("app");
const books = () => JSON.parse(localStorage.getItem(BOOKS_KEY) || "[]");
const saveBooks = (list) => localStorage.setItem(BOOKS_KEY, JSON.stringify(list));
const authed = () => localStorage.getItem(AUTH_KEY) !== null;

function el(tag, attrs, ...children) {
  const node = document.createElement(tag);
  for (const [key, value] of Object.entries(attrs || {})) {
    if (key.startsWith("on")) node.addEventListener(key.slice(2), value);
    else node.setAttribute(key, value);
  }
  node.append(...children);
  return node;
}

function renderNav() {
  document.getElementById("nav").replaceChildren(
    el("a", {href: "/books"}, "Books"),
    " ",
    el("button", {type: "button", onclick: () => { localStorage.removeItem(AUTH_KEY); location.assign("/login"); }}, "Logout"),
  );
}

function renderLogin() {
  const username = el("input", {type: "text", id: "username", name: "username", placeholder: "Username"});
  const password = el("input", {type: "password", id: "password", name: "password", placeholder: "Password"});
  const feedback = el("div", {id: "login-feedback"});
  const form = el("form", {novalidate: "", onsubmit: (event) => {
      event.preventDefault();
      feedback.replaceChildren();
      const user = username.value.trim();
      const pass = password.value.trim();
      if (!user) feedback.append(el("div", {class: "field-error"}, "Please enter your username"));
      if (!pass) feedback.append(el("div", {class: "field-error"}, "Please enter your password"));
      if (!user || !pass) return;
      if (user === "admin" && pass === "admin") {
        localStorage.setItem(AUTH_KEY, user);
        location.assign("/books");
        return;
      }
      feedback.append(el("div", {role: "alert", class: "alert-danger"}, "Invalid username or password. Please try again."));
    }},
    el("h1", {}, "Library System"),
    el("label", {for: "username"}, "Username"), username,
    el("label", {for: "password"}, "Password"), password,
    feedback,
    el("button", {type: "submit"}, "Log In"),
  );
  app.replaceChildren(form);
}

function confirmDelete(index, redraw) {
  const dialog = el("div", {role: "dialog", "aria-modal": "true", class: "modal"},
    el("p", {}, "Are you sure you want to delete this book?"),
    el("button", {type: "button", onclick: () => dialog.remove()}, "Cancel"),
    el("button", {type: "button", onclick: () => {
      const list = books();
      list.splice(index, 1);
      saveBooks(list);
      dialog.remove();
      redraw();
    }}, "Delete"),
  );
  document.body.append(dialog);
}

function renderBooks() {
  const search = el("input", {type: "search", name: "search", placeholder: "Search books..."});
  const tbody = el("tbody");
  const draw = () => {
    const query = search.value.trim().toLowerCase();
    const rows = books()
      .map((book, index) => [book, index])
      .filter(([book]) => !query || book.title.toLowerCase().includes(query))
      .map(([book, index]) => el("tr", {},
        ...Object.keys(LABELS).map((key) => el("td", {}, book[key])),
        el("td", {},
          el("button", {type: "button", class: "edit-btn", onclick: () => location.assign("/edit-book/" + index)}, "Edit"),
          " ",
          el("button", {type: "button", class: "delete-btn", onclick: () => confirmDelete(index, draw)}, "Delete"),
        ),
      ));
    tbody.replaceChildren(...rows);
  };
  search.addEventListener("input", draw);
  const head = el("tr", {}, ...Object.values(LABELS).map((label) => el("th", {}, label)), el("th", {}, "Actions"));
  app.replaceChildren(
    el("h1", {}, "Books"),
    el("div", {class: "toolbar"},
      search,
      el("button", {type: "button", onclick: () => location.assign("/add-book")}, "Add Book"),
    ),
    el("table", {}, el("thead", {}, head), tbody),
  );
  draw();
}

function renderForm(index) {
  const existing = index === null ? null : books()[index];
  if (index !== null && !existing) {
    app.replaceChildren(el("p", {}, "Book not found"));
    return;
  }
  const input = (name, type, extra) => {
    const node = el("input", {type, id: name, name, placeholder: LABELS[name], ...extra});
    if (existing) node.value = existing[name];
    return node;
  };
  const genre = el("select", {id: "genre", name: "genre"},
    el("option", {value: ""}, "Select a genre"),
    ...GENRES.map((g) => el("option", {value: g}, g)),
  );
  if (existing) genre.value = existing.genre;
  const controls = {
    title: input("title", "text"),
    author: input("author", "text"),
    isbn: input("isbn", "text"),
    genre,
    publicationDate: input("publicationDate", "date"),
    price: input("price", "number", {step: "0.01", min: "0"}),
  };
  const feedback = {};
  const rows = Object.entries(controls).map(([name, control]) => {
    feedback[name] = el("div", {class: "feedback"});
    return el("div", {class: "form-row"}, el("label", {for: name}, LABELS[name]), control, feedback[name]);
  });
  const banner = el("div", {id: "form-banner"});
  const form = el("form", {novalidate: "", onsubmit: (event) => {
      event.preventDefault();
      banner.replaceChildren();
      const values = {};
      let valid = true;
      for (const [name, control] of Object.entries(controls)) {
        values[name] = control.value.trim();
        feedback[name].replaceChildren();
        if (!values[name]) {
          valid = false;
          feedback[name].append(el("div", {class: "field-error"}, LABELS[name] + " is required."));
        }
      }
      if (!valid) return;
      const list = books();
      if (list.some((book, i) => i !== index && book.title === values.title)) {
        banner.append(el("div", {class: "error"}, "A book with this title already exists."));
        return;
      }
      if (index === null) list.push(values);
      else list[index] = values;
      saveBooks(list);
      location.assign("/books");
    }},
    el("h1", {}, index === null ? "Add Book" : "Edit Book"),
    banner,
    ...rows,
    el("button", {type: "submit"}, index === null ? "Add Book" : "Save"),
  );
  app.replaceChildren(form);
}

const path = location.pathname.replace(/\\/+$/, "") || "/";
const edit = path.match(/^\\/edit-book\\/(\\d+)$/);
if (path === "/login") {
  renderLogin();
} else if (!authed()) {
  location.replace("/login");
} else {
  renderNav();
  if (path === "/" || path === "/books") renderBooks();
  else if (path === "/add-book") renderForm(null);
  else if (edit) renderForm(Number(edit[1]));
  else app.replaceChildren(el("p", {}, "Page not found"));
}
</script>
</body>
</html>
"""

SEED_SCRIPT = """(() => {
  if (location.origin !== %(origin)s) return;
  if (localStorage.getItem(%(key)s) === null) localStorage.setItem(%(key)s, %(books)s);
})();"""


def install_fake_library(page: Page, base_url: str = FAKE_BASE_URL, books=()) -> None:
    """
    Serves the replica for every document under base_url on this page.

    Args:
        page: The Playwright Page object.
        base_url: Origin to serve; never resolved over the network.
        books: Optional BookRecords to seed the list with on first load.
    """
    origin = base_url.rstrip("/")

    def serve(route: Route):
        if route.request.resource_type != "document":
            route.fulfill(status=404, body="")
            return
        route.fulfill(status=200, content_type="text/html; charset=utf-8", body=APP_HTML)

    if books:
        records = json.dumps([b.as_form_fields() for b in books], ensure_ascii=False)
        page.add_init_script(
            SEED_SCRIPT
            % {"origin": json.dumps(origin), "key": json.dumps(BOOKS_KEY), "books": json.dumps(records)}
        )
    page.route(lambda url: url.startswith(origin), serve)
