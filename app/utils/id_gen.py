from bson import ObjectId


def new_id() -> str:
    # mesmo id do documento no Mongo, para a chave no S3 bater com o vídeo
    return str(ObjectId())
