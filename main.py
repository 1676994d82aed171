from flask import Flask, request, jsonify
from flask_cors import CORS
from quote_engine import QuoteProcessor
from quote_engine.catalog import catalog_to_dict
import os
import logging

# Configure logging
logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for all routes (the quoting UI is served from a different origin)
CORS(app)

# Initialize the quote processor
processor = QuoteProcessor()


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Quote Pricing Engine API",
        "version": "1.0",
        "endpoints": {
            "quote": "/quote [POST]",
            "catalog": "/catalog [GET]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


@app.route("/catalog", methods=["GET"])
def catalog():
    """Products, variant list prices and allowed renewal targets"""
    return jsonify({"products": catalog_to_dict()}), 200


@app.route("/quote", methods=["POST"])
def quote():
    """
    Compute the multi-year schedule for a deal configuration
    """
    try:
        # Get input data
        input_data = request.get_json(force=True, silent=True)

        if not input_data:
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        # Log request
        products = input_data.get("selectedProducts", input_data.get("selected_products", []))
        logger.info(f"Pricing quote for products: {products}")

        # Process through engine
        result = processor.process_from_dict(input_data)

        logger.info(f"Quote priced successfully: TCV {result['totals']['total_gross_usd']}")

        return jsonify(result), 200

    except (ValueError, KeyError, TypeError) as e:
        # Validation errors from engine
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "validation_failed"
        }), 400

    except Exception as e:
        # Unexpected errors
        logger.error(f"Processing error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "failed"
        }), 500


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
