# 6. predict_batch.py

import joblib

from preprocess import clean_data, encode_features


def save_model(model, scaler, features, path="listener_profiles.joblib"):
    joblib.dump({'model': model, 'scaler': scaler, 'features': list(features)}, path)
    print(f"[INFO] Model saved to: {path}")


def load_model(path="listener_profiles.joblib"):
    bundle = joblib.load(path)
    return bundle['model'], bundle['scaler'], bundle['features']


def predict_new(model, scaler, features, new_df, output_path="predicted_profiles.csv"):
    """
    Assign new survey respondents to listener profiles using a trained model and scaler.

    Parameters:
        model: Trained clustering model (e.g., KMeans).
        scaler: Fitted scaler object (e.g., StandardScaler).
        features (list): Feature columns the model was trained on.
        new_df (pd.DataFrame): Raw survey answers or an already encoded frame.
        output_path (str): File path to save predictions. Default is 'predicted_profiles.csv'.

    Returns:
        pd.DataFrame: The cleaned DataFrame with an added 'Cluster' column.
    """
    # raw answers still carry text values in the ordinal columns
    if 'Fav genre' in new_df.columns and not any(col.startswith('Fav_') for col in new_df.columns):
        new_df = encode_features(clean_data(new_df))
    else:
        new_df = new_df.copy()

    # one-hot columns for genres nobody in this batch picked
    for col in features:
        if col.startswith('Fav_') and col not in new_df.columns:
            new_df[col] = 0

    missing = [col for col in features if col not in new_df.columns]
    if missing:
        raise ValueError(f"[ERROR] Missing required features: {missing}")

    # Scale the features
    new_scaled = scaler.transform(new_df[features])

    # Predict and assign clusters
    new_df['Cluster'] = model.predict(new_scaled)

    # Save predictions
    if output_path:
        new_df.to_csv(output_path, index=False)
        print(f"[INFO] Predictions saved to: {output_path}")

    return new_df
