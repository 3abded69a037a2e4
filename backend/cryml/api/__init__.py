from cryml.api.serializers import serialize_ir

__all__ = ["serialize_ir"]
