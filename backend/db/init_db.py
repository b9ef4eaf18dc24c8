import logging

logger = logging.getLogger(__name__)

SQLITE_TABLES = [
    """
    CREATE TABLE IF NOT EXISTS projects (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title VARCHAR(255) NOT NULL,
        description TEXT,
        category VARCHAR(100) NOT NULL DEFAULT 'residential',
        client_name VARCHAR(255),
        location VARCHAR(255),
        project_date DATE,
        completion_status VARCHAR(20) DEFAULT 'completed'
            CHECK (completion_status IN ('completed', 'in_progress', 'upcoming')),
        featured INTEGER DEFAULT 0,
        display_order INTEGER DEFAULT 0,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS project_images (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        project_id INTEGER NOT NULL,
        image_path VARCHAR(500) NOT NULL,
        image_name VARCHAR(255) NOT NULL,
        original_name VARCHAR(255),
        is_primary INTEGER DEFAULT 0,
        display_order INTEGER DEFAULT 0,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (project_id) REFERENCES projects(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS project_categories (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name VARCHAR(100) NOT NULL UNIQUE,
        slug VARCHAR(100) NOT NULL UNIQUE,
        description TEXT,
        display_order INTEGER DEFAULT 0,
        is_active INTEGER DEFAULT 1,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );
    """,
]

POSTGRES_TABLES = [
    """
    CREATE TABLE IF NOT EXISTS projects (
        id SERIAL PRIMARY KEY,
        title VARCHAR(255) NOT NULL,
        description TEXT,
        category VARCHAR(100) NOT NULL DEFAULT 'residential',
        client_name VARCHAR(255),
        location VARCHAR(255),
        project_date DATE,
        completion_status VARCHAR(20) DEFAULT 'completed'
            CHECK (completion_status IN ('completed', 'in_progress', 'upcoming')),
        featured SMALLINT DEFAULT 0,
        display_order INTEGER DEFAULT 0,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS project_images (
        id SERIAL PRIMARY KEY,
        project_id INTEGER NOT NULL,
        image_path VARCHAR(500) NOT NULL,
        image_name VARCHAR(255) NOT NULL,
        original_name VARCHAR(255),
        is_primary SMALLINT DEFAULT 0,
        display_order INTEGER DEFAULT 0,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (project_id) REFERENCES projects(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS project_categories (
        id SERIAL PRIMARY KEY,
        name VARCHAR(100) NOT NULL UNIQUE,
        slug VARCHAR(100) NOT NULL UNIQUE,
        description TEXT,
        display_order INTEGER DEFAULT 0,
        is_active SMALLINT DEFAULT 1,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );
    """,
]

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_projects_category ON projects(category);",
    "CREATE INDEX IF NOT EXISTS idx_projects_featured ON projects(featured);",
    "CREATE INDEX IF NOT EXISTS idx_projects_status ON projects(completion_status);",
    "CREATE INDEX IF NOT EXISTS idx_project_images_project_id ON project_images(project_id);",
    "CREATE INDEX IF NOT EXISTS idx_project_images_is_primary ON project_images(is_primary);",
    "CREATE INDEX IF NOT EXISTS idx_project_categories_active ON project_categories(is_active);",
]

DEFAULT_CATEGORIES = [
    ('All', 'all', 'All Projects', 0),
    ('Residential', 'residential', 'Residential Construction Projects', 1),
    ('Commercial', 'commercial', 'Commercial Construction Projects', 2),
    ('Renovation', 'renovation', 'Renovation and Remodeling Projects', 3),
    ('Interior', 'interior', 'Interior Design Projects', 4),
]


def init_database(database):
    """Create the portfolio tables if they do not exist (SQLite or PostgreSQL)"""
    tables = POSTGRES_TABLES if database.dialect == 'postgresql' else SQLITE_TABLES

    with database.connect() as conn:
        with conn.transaction():
            for ddl in tables + INDEXES:
                conn.execute(ddl)

    logger.info('%s database initialized', database.dialect)


def seed_default_categories(database):
    """Insert the default categories that are not present yet. Returns how many were added."""
    added = 0
    with database.connect() as conn:
        for name, slug, description, display_order in DEFAULT_CATEGORIES:
            exists = conn.fetch_scalar(
                'SELECT COUNT(*) AS count FROM project_categories WHERE slug = ? OR name = ?',
                (slug, name)
            )
            if exists:
                continue
            conn.insert(
                '''INSERT INTO project_categories (name, slug, description, display_order, is_active)
                   VALUES (?, ?, ?, ?, 1)''',
                (name, slug, description, display_order)
            )
            added += 1
    return added
