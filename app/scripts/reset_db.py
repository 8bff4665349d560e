# reset_db.py
import asyncio
import logging

from app.core.logging import setup_logging
from app.db.database import Base, engine
from app.db import mongodb

from app.models.user import User  # noqa: F401 (registra la tabla en Base)

logger = logging.getLogger(__name__)

def reset_database():
    logger.info("Eliminando todas las tablas...")
    Base.metadata.drop_all(bind=engine)
    logger.info("Tablas eliminadas.")

    logger.info("Creando todas las tablas nuevas...")
    Base.metadata.create_all(bind=engine)
    logger.info("¡Base de datos creada exitosamente!")

async def create_mongo_indexes():
    await mongodb.connect_to_mongo()
    try:
        await mongodb.ensure_indexes(mongodb.db_station)
        logger.info("Índices de MongoDB creados.")
    finally:
        await mongodb.close_mongo_connection()

if __name__ == "__main__":
    setup_logging()
    print("ADVERTENCIA: Esto eliminará TODOS los usuarios y recreará la base de datos.")
    confirm = input("¿Estás seguro? Escribe 'si' para continuar: ")

    if confirm.lower() == 'si':
        reset_database()
        asyncio.run(create_mongo_indexes())
    else:
        print("Operación cancelada.")
