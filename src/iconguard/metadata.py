"""
--------------------------------------------------------------------------------
AUTHOR:         Nishar A Sunkesala / FixMyK8s
DATE:           2026-10-17
PURPOSE:        The Metadata Engine: derives category, search tags and a
                description for an icon from its name, with optional shape
                hints from its first variant's layers.
--------------------------------------------------------------------------------
"""
import re

from .models import IconMetadata

MAX_TAGS = 15

# Priority-ordered: the first category whose keywords hit wins
CATEGORY_KEYWORDS = {
    "navigation": ["arrow", "chevron", "menu", "hamburger", "breadcrumb", "nav", "direction", "pointer"],
    "ui": ["button", "input", "checkbox", "radio", "toggle", "switch", "slider", "close", "x", "plus", "minus", "check"],
    "social": ["facebook", "twitter", "instagram", "linkedin", "youtube", "tiktok", "pinterest", "snapchat", "whatsapp"],
    "files": ["folder", "file", "document", "pdf", "doc", "download", "upload", "attach"],
    "communication": ["mail", "email", "message", "chat", "comment", "notification", "bell", "phone", "call"],
    "media": ["play", "pause", "stop", "video", "audio", "music", "volume", "speaker", "microphone", "camera"],
    "editing": ["pen", "pencil", "brush", "edit", "crop", "cut", "copy", "paste", "undo", "redo"],
    "arrows": ["arrow", "chevron", "caret", "triangle"],
    "shapes": ["circle", "square", "rectangle", "triangle", "star", "heart", "diamond"],
    "weather": ["sun", "moon", "cloud", "rain", "snow", "storm", "wind", "lightning"],
    "business": ["chart", "graph", "money", "dollar", "briefcase", "analytics", "trending"],
}

# Synonyms, related terms and Portuguese translations per recognized word
TAG_SYNONYMS = {
    # Navigation & Direction
    "arrow": ["direction", "pointer", "navigate", "seta", "direção", "navigation"],
    "chevron": ["arrow", "caret", "direction", "expand", "collapse"],
    "menu": ["hamburger", "navigation", "nav", "sidebar", "drawer"],
    "home": ["house", "homepage", "start", "main", "início", "casa", "principal"],
    "back": ["return", "previous", "undo", "voltar", "anterior"],
    "forward": ["next", "advance", "continue", "próximo", "avançar"],

    # User & People
    "user": ["person", "profile", "account", "avatar", "usuário", "perfil", "conta"],
    "users": ["people", "group", "team", "community", "pessoas", "grupo", "equipe"],
    "profile": ["user", "account", "avatar", "identity", "perfil"],

    # Communication
    "mail": ["email", "message", "envelope", "inbox", "correio", "mensagem"],
    "message": ["chat", "comment", "conversation", "text", "mensagem", "conversa"],
    "notification": ["bell", "alert", "reminder", "notificação", "alerta", "lembrete"],
    "phone": ["call", "telephone", "mobile", "contact", "telefone", "celular"],
    "chat": ["message", "conversation", "talk", "messenger", "conversa"],

    # Time & Calendar
    "calendar": ["date", "schedule", "event", "agenda", "calendário", "data", "compromisso"],
    "time": ["clock", "hour", "watch", "timer", "hora", "relógio", "tempo"],
    "clock": ["time", "hour", "watch", "timer", "relógio"],

    # Files & Documents
    "file": ["document", "doc", "paper", "arquivo", "documento"],
    "folder": ["directory", "collection", "pasta", "diretório"],
    "document": ["file", "paper", "text", "doc", "documento", "arquivo"],
    "download": ["save", "export", "get", "baixar", "salvar"],
    "upload": ["import", "send", "add", "enviar", "carregar"],

    # Actions
    "search": ["find", "magnify", "lookup", "query", "buscar", "procurar", "pesquisar"],
    "add": ["plus", "new", "create", "insert", "adicionar", "novo", "criar"],
    "delete": ["trash", "remove", "bin", "erase", "deletar", "remover", "lixo"],
    "edit": ["pencil", "modify", "change", "write", "editar", "modificar", "escrever"],
    "save": ["disk", "store", "keep", "salvar", "guardar"],
    "close": ["x", "exit", "cancel", "dismiss", "fechar", "sair", "cancelar"],
    "check": ["checkmark", "tick", "confirm", "yes", "approve", "confirmar", "sim"],
    "settings": ["config", "preferences", "gear", "options", "configurações", "opções"],

    # Media
    "image": ["photo", "picture", "gallery", "imagem", "foto"],
    "video": ["play", "movie", "film", "vídeo", "filme"],
    "camera": ["photo", "picture", "lens", "câmera", "foto"],
    "music": ["audio", "sound", "song", "música", "som"],

    # Status & Feedback
    "star": ["favorite", "bookmark", "rating", "featured", "estrela", "favorito"],
    "heart": ["like", "love", "favorite", "coração", "curtir"],
    "warning": ["alert", "caution", "danger", "error", "aviso", "alerta", "perigo"],
    "info": ["information", "help", "question", "informação", "ajuda"],
    "error": ["warning", "alert", "problem", "issue", "erro", "problema"],
    "success": ["check", "confirm", "done", "complete", "sucesso", "concluído"],

    # Location
    "location": ["map", "pin", "marker", "place", "gps", "localização", "lugar"],
    "map": ["location", "geography", "navigation", "gps", "mapa"],

    # Social
    "share": ["export", "send", "distribute", "compartilhar", "enviar"],
    "like": ["heart", "favorite", "thumbs-up", "curtir", "gostar"],

    # Shopping & Commerce
    "cart": ["shopping", "basket", "checkout", "carrinho", "compras"],
    "price": ["money", "cost", "payment", "preço", "dinheiro"],
    "credit-card": ["payment", "card", "checkout", "cartão", "pagamento"],

    # Security
    "lock": ["secure", "private", "protected", "password", "cadeado", "seguro"],
    "unlock": ["open", "access", "public", "desbloquear", "abrir"],
    "key": ["password", "access", "security", "chave", "senha"],

    # UI Elements
    "button": ["click", "action", "control", "botão", "ação"],
    "toggle": ["switch", "on-off", "enable", "disable", "alternar"],
    "slider": ["range", "adjust", "control", "controle"],
    "dropdown": ["select", "menu", "options", "menu-suspenso", "seleção"],

    # Weather
    "sun": ["sunny", "day", "weather", "sol", "ensolarado"],
    "moon": ["night", "dark", "lunar", "lua", "noite"],
    "cloud": ["cloudy", "weather", "sky", "nuvem", "tempo"],
    "rain": ["weather", "storm", "water", "chuva", "tempo"],
}

# (trigger words, tags added when any trigger is present)
CONTEXT_TAGS = [
    ({"arrow", "chevron", "menu"}, ["navigation", "ui-control"]),
    ({"add", "delete", "edit", "save"}, ["action", "button", "interactive"]),
    ({"mail", "message", "chat", "phone"}, ["communication", "messaging", "contact"]),
    ({"image", "video", "camera", "music"}, ["media", "content"]),
    ({"file", "folder", "document"}, ["file-system", "storage", "organization"]),
    ({"check", "warning", "error", "success"}, ["status", "feedback", "indicator"]),
    ({"share", "like", "heart", "star"}, ["social", "engagement", "interaction"]),
    ({"calendar", "time", "clock"}, ["scheduling", "temporal", "planning"]),
    ({"cart", "price", "card"}, ["commerce", "shopping", "payment"]),
    ({"lock", "key", "unlock"}, ["security", "privacy", "authentication"]),
    ({"user", "profile", "account"}, ["account", "identity", "personalization"]),
]

DIRECTIONS = ["up", "down", "left", "right", "north", "south", "east", "west"]

# (trigger words, description); checked in order after the arrow template
DESCRIPTION_TEMPLATES = [
    ({"calendar"}, "Calendar icon for date selection and scheduling"),
    ({"user", "person", "profile"}, "User profile icon for account and settings"),
    ({"home", "house"}, "Home icon for navigation to main page"),
    ({"search", "magnify"}, "Search icon for find and lookup functionality"),
    ({"settings", "gear", "config"}, "Settings icon for configuration and preferences"),
    ({"star"}, "Star icon for favorites and ratings"),
    ({"heart"}, "Heart icon for likes and favorites"),
    ({"trash", "delete"}, "Delete icon for removing items"),
    ({"mail", "email", "envelope"}, "Email icon for messaging and communication"),
    ({"bell", "notification"}, "Notification icon for alerts and updates"),
]


def name_to_words(name):
    """'Arrow-Up_2' -> ['arrow', 'up']"""
    cleaned = re.sub(r"\d+", "", re.sub(r"[-_]", " ", name.lower())).strip()
    return cleaned.split()


def _capitalize(text):
    return text[:1].upper() + text[1:]


def _add_unique(tags, values):
    for value in values:
        if value not in tags:
            tags.append(value)


def detect_category(words):
    word_set = set(words)
    for category, keywords in CATEGORY_KEYWORDS.items():
        if word_set.intersection(keywords):
            return category
    return "other"


def build_tags(words):
    tags = []
    for word in words:
        _add_unique(tags, [word])
        _add_unique(tags, TAG_SYNONYMS.get(word, []))

    word_set = set(words)
    for triggers, context in CONTEXT_TAGS:
        if word_set & triggers:
            _add_unique(tags, context)

    return tags[:MAX_TAGS]


def describe(words, original_name):
    if not words:
        return f"{original_name} icon"

    word_set = set(words)
    if word_set & {"arrow", "chevron"}:
        direction = next((w for w in words if w in DIRECTIONS), None)
        if direction:
            return f"{_capitalize(direction)}ward arrow icon for navigation"
        return "Arrow icon for navigation and direction"

    for triggers, description in DESCRIPTION_TEMPLATES:
        if word_set & triggers:
            return description

    return f"{_capitalize(' '.join(words))} icon"


def generate_metadata_from_name(name):
    words = name_to_words(name)
    return IconMetadata(
        category=detect_category(words),
        tags=build_tags(words),
        description=describe(words, name),
    )


# ---------------------------------------------------------------------------
# Shape hints
# ---------------------------------------------------------------------------

def _layer_tags(child):
    """Tags (and maybe a category) suggested by one direct child layer."""
    tags = []
    category = None
    lowered = child.name.lower()

    if child.type == "VECTOR":
        if child.height:
            ratio = child.width / child.height
        else:
            ratio = float("inf") if child.width else float("nan")
        near_square = abs(ratio - 1) < 0.1

        if near_square and "circle" in lowered:
            tags += ["circle", "round", "circular"]
        if "ellipse" in lowered or "oval" in lowered:
            tags += ["ellipse", "oval", "rounded"]
        if near_square and "circle" not in lowered:
            tags += ["square", "box"]
        if abs(ratio - 1) > 0.3:
            tags += ["rectangle", "rectangular"]
        if "arrow" in lowered:
            tags += ["arrow", "direction", "pointer", "navigate"]
            category = "arrows"
        if "star" in lowered:
            tags += ["star", "rating", "favorite"]
        if "heart" in lowered:
            tags += ["heart", "like", "love"]
    elif child.type == "LINE":
        tags += ["line", "stroke", "linear"]
    elif child.type == "ELLIPSE":
        tags += ["circle", "ellipse", "round"]
    elif child.type == "RECTANGLE":
        tags += ["rectangle", "box", "square"]
    elif child.type == "STAR":
        tags += ["star", "rating", "favorite", "polygon"]
    elif child.type == "POLYGON":
        tags += ["polygon", "geometric", "shape"]

    return tags, category


def analyze_icon_geometry(node):
    """
    Supplementary tags from the layers of the first representative variant.
    Returns a dict with optional 'category' and 'tags' keys.
    """
    enhancements = {}
    target = node.children[0] if node.kind == "asset-set" and node.children else node
    children = target.children if target.kind == "asset" else []

    tags = []
    has_circles = has_rectangles = has_lines = has_complex = False
    has_fills = has_strokes = False

    for child in children:
        child_tags, category = _layer_tags(child)
        tags += child_tags
        if category and "category" not in enhancements:
            enhancements["category"] = category

        if child.type == "VECTOR":
            has_circles = has_circles or "circle" in child_tags
            has_rectangles = has_rectangles or bool({"square", "rectangle"} & set(child_tags))
            has_fills = has_fills or bool(child.visible_fills)
            has_strokes = has_strokes or bool(child.visible_strokes)
            if child.width > 5 and child.height > 5:
                has_complex = True
        elif child.type == "LINE":
            has_lines = True
        elif child.type == "ELLIPSE":
            has_circles = True
        elif child.type == "RECTANGLE":
            has_rectangles = True

    if has_fills and not has_strokes:
        tags += ["filled", "solid"]
    if has_strokes and not has_fills:
        tags += ["outline", "stroke", "line-art"]
    if has_circles and has_rectangles:
        tags += ["composite", "combined-shapes"]
    if has_complex:
        tags += ["detailed", "complex"]
    if has_lines:
        tags += ["minimal", "simple"]

    if tags:
        unique = []
        _add_unique(unique, tags)
        enhancements["tags"] = unique
    return enhancements


def merge_metadata(metadata, enhancements):
    """Union the tags; the shape category only replaces the 'other' fallback."""
    tags = list(metadata.tags)
    _add_unique(tags, enhancements.get("tags", []))
    category = metadata.category
    if enhancements.get("category") and category == "other":
        category = enhancements["category"]
    return IconMetadata(category=category, tags=tags, description=metadata.description)
