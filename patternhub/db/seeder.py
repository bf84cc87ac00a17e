"""
Database seeder – creates a default admin account and a small demo catalogue.

⚠️  FOR DEVELOPMENT ONLY.
    Set SEED_DEMO_DATA=false before deploying to production.

Default credentials:
    username : admin
    password : Admin1234!
    email    : admin@patternhub.io
"""
import logging

from patternhub.core.cache import cache
from patternhub.core.cache_keys import CacheTags
from patternhub.core.security import hash_password
from patternhub.db.database import get_connection
from patternhub.models.user import UserRole
from patternhub.repositories.category_repository import CategoryRepository
from patternhub.repositories.content_repository import ContentRepository
from patternhub.repositories.pattern_repository import PatternRepository
from patternhub.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Seed data – change these values freely during development
# ---------------------------------------------------------------------------
ADMIN_USERNAME = "admin"
ADMIN_EMAIL = "admin@patternhub.io"
ADMIN_PASSWORD = "Admin1234!"
ADMIN_FULL_NAME = "Default Admin"

DEMO_CATEGORIES = [
    {
        "slug": "creational-patterns",
        "name": {"zh": "创建型模式", "en": "Creational Patterns"},
        "description": {
            "zh": "关注对象的创建方式，将实例化过程与使用者解耦。",
            "en": "Ways to create objects while hiding the instantiation logic.",
        },
    },
    {
        "slug": "structural-patterns",
        "name": {"zh": "结构型模式", "en": "Structural Patterns"},
        "description": {
            "zh": "关注类与对象的组合，形成更大的结构。",
            "en": "How classes and objects are composed into larger structures.",
        },
    },
    {
        "slug": "behavioral-patterns",
        "name": {"zh": "行为型模式", "en": "Behavioral Patterns"},
        "description": {
            "zh": "关注对象之间的职责分配与通信。",
            "en": "How responsibilities and communication flow between objects.",
        },
    },
]

SINGLETON_ZH = """# 单例模式

确保一个类只有一个实例，并提供一个全局访问点。

## 结构

```mermaid
classDiagram
    class Singleton {
        -instance: Singleton
        +getInstance() Singleton
    }
```

## 示例

```python
class Config:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance
```

## 适用场景

- [x] 共享配置
- [ ] 需要多个实例的对象
"""

SINGLETON_EN = """# Singleton

Ensure a class has only one instance and provide a global point of access to it.

## Structure

```mermaid
classDiagram
    class Singleton {
        -instance: Singleton
        +getInstance() Singleton
    }
```

## Example

```python
class Config:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance
```

## When to use

| Situation | Fit |
|-----------|-----|
| Shared configuration | Good |
| Objects needing several instances | Poor |
"""

FACTORY_METHOD_ZH = """# 工厂方法模式

定义一个用于创建对象的接口，让子类决定实例化哪一个类。

## 参与者

- **Creator**：声明工厂方法
- **ConcreteCreator**：重写工厂方法返回具体产品
"""

ADAPTER_EN = """# Adapter

Convert the interface of a class into another interface clients expect.

## Participants

- **Target** defines the interface clients use
- **Adaptee** has the interface that needs adapting
- **Adapter** translates calls from Target to Adaptee
"""

OBSERVER_ZH = """# 观察者模式

定义对象间的一对多依赖，当一个对象状态改变时，所有依赖者都会收到通知。

## 时序

```mermaid
sequenceDiagram
    Subject->>Observer: notify()
    Observer-->>Subject: getState()
```
"""

DEMO_PATTERNS = [
    {
        "category": "creational-patterns",
        "slug": "singleton",
        "name": {"zh": "单例模式", "en": "Singleton"},
        "description": {
            "zh": "保证一个类仅有一个实例。",
            "en": "Guarantee a class has a single instance.",
        },
        "content": {"zh": SINGLETON_ZH, "en": SINGLETON_EN},
        "sort_order": 1,
    },
    {
        "category": "creational-patterns",
        "slug": "factory-method",
        "name": {"zh": "工厂方法模式", "en": "Factory Method"},
        "description": {"zh": "由子类决定要创建的对象。"},
        "content": {"zh": FACTORY_METHOD_ZH},
        "sort_order": 2,
    },
    {
        "category": "structural-patterns",
        "slug": "adapter",
        "name": {"zh": "适配器模式", "en": "Adapter"},
        "description": {"en": "Make incompatible interfaces work together."},
        "content": {"en": ADAPTER_EN},
        "sort_order": 1,
    },
    {
        "category": "behavioral-patterns",
        "slug": "observer",
        "name": {"zh": "观察者模式", "en": "Observer"},
        "description": {"zh": "一对多的状态变更通知。"},
        "content": {"zh": OBSERVER_ZH},
        "sort_order": 1,
    },
    {
        "category": "behavioral-patterns",
        "slug": "strategy",
        "name": {"zh": "策略模式", "en": "Strategy"},
        "description": {"en": "Swap algorithms at runtime."},
        "content": {},
        "sort_order": 2,
    },
]


def seed_admin() -> None:
    """Create the default admin account unless one with that username exists."""
    conn = get_connection()
    try:
        users = UserRepository(conn)
        if users.find_by_login(ADMIN_USERNAME):
            logger.info("Seeder: admin '%s' present, nothing to do", ADMIN_USERNAME)
            return
        users.create(
            email=ADMIN_EMAIL,
            username=ADMIN_USERNAME,
            hashed_password=hash_password(ADMIN_PASSWORD),
            role=UserRole.ADMIN,
            full_name=ADMIN_FULL_NAME,
        )
        conn.commit()
        logger.warning(
            "Seeder: created admin '%s' with the development password; change it", ADMIN_USERNAME
        )
    finally:
        conn.close()


def seed_catalog() -> None:
    """
    Insert the demo categories and patterns, with their Markdown bodies,
    when the catalogue is empty.
    """
    conn = get_connection()
    try:
        categories = CategoryRepository(conn)
        if categories.count():
            logger.info("Seeder: catalogue already populated – skipping.")
            return

        patterns = PatternRepository(conn)
        content = ContentRepository()
        ids = {}
        for order, item in enumerate(DEMO_CATEGORIES, start=1):
            category = categories.create(
                slug=item["slug"],
                name=item["name"],
                description=item["description"],
                sort_order=order,
            )
            ids[category.slug] = category.id

        for item in DEMO_PATTERNS:
            pattern = patterns.create(
                category_id=ids[item["category"]],
                slug=item["slug"],
                name=item["name"],
                description=item["description"],
                is_published=True,
                sort_order=item["sort_order"],
            )
            paths = {
                locale: content.save_content(pattern, body, locale)
                for locale, body in item["content"].items()
            }
            if paths:
                patterns.update(pattern.id, content_paths=paths)

        conn.commit()
        logger.info(
            "Seeder: created %s categories and %s patterns.",
            len(DEMO_CATEGORIES),
            len(DEMO_PATTERNS),
        )
    finally:
        conn.close()
    cache.forget_all([CacheTags.CATALOG])
