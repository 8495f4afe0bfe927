from functools import lru_cache

from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_core.messages import AIMessage

from lib.config import GEMINI_MODEL, require_google_api_key


# define model configuration
config = {
    "model": GEMINI_MODEL,
    "temperature": 0.2,
    "max_output_tokens": 6000,
    "top_p": 0.8,
    "top_k": 40,
}


# initialize gemini Chat Model on first use
@lru_cache(maxsize=1)
def get_gemini() -> ChatGoogleGenerativeAI:
    return ChatGoogleGenerativeAI(
        model=config["model"],
        google_api_key=require_google_api_key(),
        temperature=config["temperature"],
        max_output_tokens=config["max_output_tokens"],
        top_p=config["top_p"],
        top_k=config["top_k"],
    )


# function declaration for gemini response
def get_gemini_response(prompt: str) -> AIMessage:
    response = get_gemini().invoke(prompt)
    return response


if __name__ == "__main__":
    test_prompt = "Summarise what a teacher-training workshop report usually contains."
    print(get_gemini_response(test_prompt).content)
