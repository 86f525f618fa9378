"""Categories the in-memory store starts with."""

DEFAULT_CATEGORIES = [
    {'id': '1', 'name': 'Food & Dining', 'color': '#2E7D32', 'icon': 'Utensils'},
    {'id': '2', 'name': 'Transportation', 'color': '#1565C0', 'icon': 'Car'},
    {'id': '3', 'name': 'Shopping', 'color': '#F57C00', 'icon': 'ShoppingBag'},
    {'id': '4', 'name': 'Entertainment', 'color': '#9C27B0', 'icon': 'Film'},
    {'id': '5', 'name': 'Bills & Utilities', 'color': '#FF5722', 'icon': 'Zap'},
    {'id': '6', 'name': 'Healthcare', 'color': '#607D8B', 'icon': 'Heart'},
]
